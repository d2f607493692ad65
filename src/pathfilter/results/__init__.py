"""Result models and aggregation."""

from pathfilter.results.aggregator import RESERVED_OUTPUTS, summarize
from pathfilter.results.models import ResultSummary, RuleSummary

__all__ = ["RESERVED_OUTPUTS", "ResultSummary", "RuleSummary", "summarize"]
