"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict

from pathfilter import __version__
from pathfilter.git.models import FileRecord
from pathfilter.output.list_format import ListFormat, serialize_files
from pathfilter.results.models import ResultSummary


def _file_dict(f: FileRecord) -> Dict[str, Any]:
    return {
        "filename": f.filename,
        "status": f.status.value,
        **({"additions": f.additions} if f.additions is not None else {}),
        **({"deletions": f.deletions} if f.deletions is not None else {}),
    }


def to_dict(
    summary: ResultSummary,
    *,
    changed_files: int = 0,
    list_files: ListFormat = ListFormat.NONE,
) -> Dict[str, Any]:
    """Convert a ResultSummary to a JSON-serialisable dict."""
    filters: Dict[str, Any] = {}
    for rule in summary.rules:
        entry: Dict[str, Any] = {
            "changed": rule.has_match,
            "count": rule.count,
            "files": [_file_dict(f) for f in rule.files],
        }
        if list_files is not ListFormat.NONE:
            entry["list"] = serialize_files(rule.files, list_files)
        filters[rule.name] = entry

    return {
        "version": __version__,
        "changed_files": changed_files,
        "any_changed": summary.any_changed,
        "all_changed": summary.all_changed,
        "changes": summary.changed_rule_names,
        "filters": filters,
        "collisions": list(summary.collisions),
    }


def render(
    summary: ResultSummary,
    *,
    changed_files: int = 0,
    list_files: ListFormat = ListFormat.NONE,
) -> str:
    """Return formatted JSON string."""
    return json.dumps(
        to_dict(summary, changed_files=changed_files, list_files=list_files), indent=2
    )
