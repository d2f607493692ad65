"""Filter rules — glob patterns, document parser, matching engine."""

from pathfilter.filters.engine import Filter
from pathfilter.filters.models import (
    SUPPORTED_PREDICATE_QUANTIFIERS,
    FilterConfig,
    FilterResults,
    FilterRuleItem,
    PredicateQuantifier,
    is_predicate_quantifier,
)
from pathfilter.filters.parser import FilterError, PatternCompileError, load_filters, parse_filters
from pathfilter.filters.patterns import GlobPattern, MatchOptions, compile_glob

__all__ = [
    "SUPPORTED_PREDICATE_QUANTIFIERS",
    "Filter",
    "FilterConfig",
    "FilterError",
    "FilterResults",
    "FilterRuleItem",
    "GlobPattern",
    "MatchOptions",
    "PatternCompileError",
    "PredicateQuantifier",
    "compile_glob",
    "is_predicate_quantifier",
    "load_filters",
    "parse_filters",
]
