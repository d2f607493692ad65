"""Serialisation of matched file lists for downstream shells and tools."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Iterable

from pathfilter.git.models import FileRecord

_CSV_SAFE_RE = re.compile(r"[a-zA-Z0-9._+:@%/-]+")
_SHELL_SAFE_RE = re.compile(r"[a-zA-Z0-9,._+:@%/-]+")
_SHELL_QUOTE_SAFE_RE = re.compile(r"[a-zA-Z0-9,._+:@%/'\s-]+")
_BACKSLASH_UNSAFE_RE = re.compile(r"([^a-zA-Z0-9,._+:@%/-])")


class ListFormat(str, Enum):
    NONE = "none"
    CSV = "csv"
    JSON = "json"
    SHELL = "shell"
    ESCAPE = "escape"


def csv_escape(value: str) -> str:
    """Quote *value* for CSV (RFC 4180) only when it has unsafe characters."""
    if value == "" or _CSV_SAFE_RE.fullmatch(value):
        return value
    return '"' + value.replace('"', '""') + '"'


def backslash_escape(value: str) -> str:
    """Backslash-escape every character outside a small safe set."""
    return _BACKSLASH_UNSAFE_RE.sub(r"\\\1", value)


def shell_escape(value: str) -> str:
    """Escape *value* as a shell argument with as little quoting as possible."""
    if value == "" or _SHELL_SAFE_RE.fullmatch(value):
        return value

    if "'" in value:
        if _SHELL_QUOTE_SAFE_RE.fullmatch(value):
            return f'"{value}"'
        return "\\'".join(shell_escape(part) for part in value.split("'"))

    return f"'{value}'"


def serialize_files(files: Iterable[FileRecord], fmt: ListFormat) -> str:
    names = [f.filename for f in files]
    if fmt is ListFormat.CSV:
        return ",".join(csv_escape(n) for n in names)
    if fmt is ListFormat.JSON:
        return json.dumps(names)
    if fmt is ListFormat.SHELL:
        return " ".join(shell_escape(n) for n in names)
    if fmt is ListFormat.ESCAPE:
        return " ".join(backslash_escape(n) for n in names)
    return ""
