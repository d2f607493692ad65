"""Named outputs consumed by CI steps (``name=value`` pairs)."""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Dict

from pathfilter.output.list_format import ListFormat, serialize_files
from pathfilter.results.aggregator import (
    ALL_CHANGED_OUTPUT,
    ANY_CHANGED_OUTPUT,
    CHANGES_OUTPUT,
)
from pathfilter.results.models import ResultSummary

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_outputs(
    summary: ResultSummary, list_files: ListFormat = ListFormat.NONE
) -> Dict[str, str]:
    """Return outputs in emission order: per-rule values, then aggregates.

    A name is set at most once. A later value for a taken name is dropped
    with a warning and recorded in ``summary.collisions``.
    """
    outputs: Dict[str, str] = {}

    def put(name: str, value: str) -> None:
        if name in outputs:
            if name not in summary.collisions:
                logger.warning("Cannot set output %r - name already used by another output", name)
                summary.collisions.append(name)
            return
        outputs[name] = value

    for rule in summary.rules:
        put(rule.name, _flag(rule.has_match))
        put(f"{rule.name}_count", str(rule.count))
        if list_files is not ListFormat.NONE:
            put(f"{rule.name}_files", serialize_files(rule.files, list_files))

    put(CHANGES_OUTPUT, json.dumps(summary.changed_rule_names))
    put(ANY_CHANGED_OUTPUT, _flag(summary.any_changed))
    put(ALL_CHANGED_OUTPUT, _flag(summary.all_changed))
    return outputs


def format_outputs(outputs: Dict[str, str]) -> str:
    """Render outputs in the ``$GITHUB_OUTPUT`` file syntax."""
    lines = []
    for name, value in outputs.items():
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            lines.extend([f"{name}<<{delimiter}", value, delimiter])
        else:
            lines.append(f"{name}={value}")
    return "\n".join(lines) + "\n" if lines else ""


def write_outputs(outputs: Dict[str, str], path: Path) -> None:
    """Append outputs to *path* (created if missing)."""
    with open(path, "a", encoding="utf-8") as f:
        f.write(format_outputs(outputs))
