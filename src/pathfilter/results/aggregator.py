"""Derive summary signals from filter results without re-running matching."""

from __future__ import annotations

import logging
from typing import List

from pathfilter.filters.models import FilterResults
from pathfilter.results.models import ResultSummary, RuleSummary

logger = logging.getLogger(__name__)

CHANGES_OUTPUT = "changes"
ANY_CHANGED_OUTPUT = "any_changed"
ALL_CHANGED_OUTPUT = "all_changed"

RESERVED_OUTPUTS = (CHANGES_OUTPUT, ANY_CHANGED_OUTPUT, ALL_CHANGED_OUTPUT)


def reserved_name_collisions(rule_names: List[str]) -> List[str]:
    """Return rule names that shadow a run-wide aggregate output."""
    return [name for name in rule_names if name in RESERVED_OUTPUTS]


def summarize(results: FilterResults) -> ResultSummary:
    """Build a ResultSummary. Rule order follows *results* (definition order)."""
    summary = ResultSummary(
        rules=[RuleSummary(name=name, files=list(files)) for name, files in results.items()],
    )
    for name in reserved_name_collisions(list(results)):
        logger.warning(
            "Filter %r has the same name as the %r aggregate output; "
            "the aggregate will not be published under that name",
            name,
            name,
        )
        summary.collisions.append(name)
    return summary
