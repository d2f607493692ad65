"""Result summary models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pathfilter.git.models import FileRecord


@dataclass(frozen=True)
class RuleSummary:
    """Outcome of one rule."""

    name: str
    files: List[FileRecord] = field(default_factory=list)

    @property
    def has_match(self) -> bool:
        return len(self.files) > 0

    @property
    def count(self) -> int:
        return len(self.files)


@dataclass
class ResultSummary:
    """Per-rule outcomes plus run-wide aggregates."""

    rules: List[RuleSummary] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)  # output names claimed twice

    @property
    def any_changed(self) -> bool:
        return any(r.has_match for r in self.rules)

    @property
    def all_changed(self) -> bool:
        # vacuously true with zero rules
        return all(r.has_match for r in self.rules)

    @property
    def changed_rule_names(self) -> List[str]:
        return [r.name for r in self.rules if r.has_match]

    @property
    def total_files(self) -> int:
        return sum(r.count for r in self.rules)

    def get(self, name: str) -> RuleSummary:
        for r in self.rules:
            if r.name == name:
                return r
        raise KeyError(name)
