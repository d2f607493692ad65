"""Data models for changed files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChangeStatus(str, Enum):
    ADDED = "added"
    COPIED = "copied"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    UNMERGED = "unmerged"

    @classmethod
    def parse(cls, token: str) -> "ChangeStatus":
        """Return the status named by *token* (trimmed, case-insensitive).

        Raises ValueError for anything outside the six known statuses.
        """
        return cls(token.strip().lower())


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A single changed file as reported by change detection."""

    filename: str
    status: ChangeStatus
    additions: Optional[int] = None  # pass-through only, never used for matching
    deletions: Optional[int] = None
