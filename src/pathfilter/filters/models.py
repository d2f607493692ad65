"""Filter rule data model — built once from a filters document, read-only after."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from pathfilter.filters.patterns import GlobPattern
from pathfilter.git.models import ChangeStatus, FileRecord

FilterResults = Dict[str, List[FileRecord]]


class PredicateQuantifier(str, Enum):
    SOME = "some"  # a file matches when any clause of the rule matches
    EVERY = "every"  # a file matches only when all clauses match


SUPPORTED_PREDICATE_QUANTIFIERS: Tuple[str, ...] = tuple(q.value for q in PredicateQuantifier)


def is_predicate_quantifier(value: object) -> bool:
    return isinstance(value, str) and value in SUPPORTED_PREDICATE_QUANTIFIERS


@dataclass(frozen=True, eq=False)
class FilterRuleItem:
    """One ``(optional status set, pattern)`` clause of a named rule.

    ``statuses`` is None when the clause applies to files of any status.
    """

    matcher: GlobPattern
    statuses: Optional[FrozenSet[ChangeStatus]] = None

    @property
    def pattern(self) -> str:
        return self.matcher.pattern

    def matches(self, file: FileRecord) -> bool:
        if self.statuses is not None and file.status not in self.statuses:
            return False
        return self.matcher.matches(file.filename)


@dataclass(frozen=True)
class FilterConfig:
    """Named rules in definition order, each an ordered tuple of clauses."""

    rules: Mapping[str, Tuple[FilterRuleItem, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    quantifier: PredicateQuantifier = PredicateQuantifier.SOME

    def __post_init__(self) -> None:
        if not isinstance(self.rules, MappingProxyType):
            frozen = {name: tuple(items) for name, items in self.rules.items()}
            object.__setattr__(self, "rules", MappingProxyType(frozen))

    @property
    def rule_names(self) -> List[str]:
        return list(self.rules)

    def __len__(self) -> int:
        return len(self.rules)
