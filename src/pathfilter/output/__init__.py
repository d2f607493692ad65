"""Output formats — file lists, named outputs, JSON and terminal reports."""

from pathfilter.output.list_format import (
    ListFormat,
    backslash_escape,
    csv_escape,
    serialize_files,
    shell_escape,
)
from pathfilter.output.outputs import build_outputs, format_outputs, write_outputs

__all__ = [
    "ListFormat",
    "backslash_escape",
    "build_outputs",
    "csv_escape",
    "format_outputs",
    "serialize_files",
    "shell_escape",
    "write_outputs",
]
