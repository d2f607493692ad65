"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json", "outputs"]
ListFilesFormat = Literal["none", "csv", "json", "shell", "escape"]
Quantifier = Literal["some", "every"]

OUTPUT_FORMATS = ("terminal", "json", "outputs")
LIST_FILES_FORMATS = ("none", "csv", "json", "shell", "escape")
QUANTIFIERS = ("some", "every")


@dataclass
class FiltersConfig:
    filters: str = ".github/filters.yml"  # path, or inline YAML when it has a newline
    predicate_quantifier: Quantifier = "some"


@dataclass
class GitConfig:
    base: str = ""  # empty = compare the last commit
    head: str = "HEAD"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    list_files: ListFilesFormat = "none"


@dataclass
class PathFilterConfig:
    version: str = "1.0"
    filters: FiltersConfig = field(default_factory=FiltersConfig)
    git: GitConfig = field(default_factory=GitConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
