"""Filter engine — evaluates changed files against every configured rule."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from pathfilter.filters.models import (
    FilterConfig,
    FilterResults,
    FilterRuleItem,
    PredicateQuantifier,
)
from pathfilter.filters.parser import load_filters
from pathfilter.git.models import FileRecord

logger = logging.getLogger(__name__)


class Filter:
    """Holds a parsed rule table and matches file lists against it.

    ``match`` never mutates the rule table or its input, so one instance can
    be shared between callers.
    """

    def __init__(self, config: Optional[FilterConfig] = None) -> None:
        self._config = config if config is not None else FilterConfig()

    @classmethod
    def from_yaml(
        cls,
        text: str,
        quantifier: PredicateQuantifier = PredicateQuantifier.SOME,
    ) -> "Filter":
        return cls(load_filters(text, quantifier=quantifier))

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def rule_names(self) -> List[str]:
        return self._config.rule_names

    def match(self, files: Iterable[FileRecord]) -> FilterResults:
        """Return, for every rule in definition order, the matching files.

        Every rule name is present in the result; a rule without matches maps
        to an empty list. File order follows the input.
        """
        files = list(files)
        results: FilterResults = {}
        for name, items in self._config.rules.items():
            results[name] = [f for f in files if self._is_match(f, items)]
            logger.debug("Filter %s matched %d of %d files", name, len(results[name]), len(files))
        return results

    def _is_match(self, file: FileRecord, items: Sequence[FilterRuleItem]) -> bool:
        if self._config.quantifier is PredicateQuantifier.EVERY:
            return all(item.matches(file) for item in items)
        return any(item.matches(file) for item in items)
