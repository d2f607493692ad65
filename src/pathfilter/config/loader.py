"""Load and merge configuration from .pathfilter.toml, CLI flags, and env vars."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pathfilter.config.schema import (
    LIST_FILES_FORMATS,
    OUTPUT_FORMATS,
    QUANTIFIERS,
    FiltersConfig,
    GitConfig,
    OutputConfig,
    PathFilterConfig,
)

CONFIG_FILENAME = ".pathfilter.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: PathFilterConfig) -> None:
    """Apply PATHFILTER_* environment variable overrides."""
    if val := os.environ.get("PATHFILTER_FILTERS"):
        cfg.filters.filters = val
    if val := os.environ.get("PATHFILTER_PREDICATE_QUANTIFIER"):
        if val in QUANTIFIERS:
            cfg.filters.predicate_quantifier = val  # type: ignore[assignment]
    if val := os.environ.get("PATHFILTER_BASE"):
        cfg.git.base = val
    if val := os.environ.get("PATHFILTER_HEAD"):
        cfg.git.head = val
    if val := os.environ.get("PATHFILTER_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("PATHFILTER_LIST_FILES"):
        if val.lower() in LIST_FILES_FORMATS:
            cfg.output.list_files = val.lower()  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    values = data.get(section, {})
    if not isinstance(values, dict):
        raise ConfigError(f"[{section}] must be a table, got {type(values).__name__}")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in values.items() if k in valid_fields}
    return cls(**filtered)


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> PathFilterConfig:
    """Load, validate, and return a PathFilterConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = PathFilterConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = PathFilterConfig(
            version=raw.get("version", "1.0"),
            filters=_build_section(raw, FiltersConfig, "filters"),
            git=_build_section(raw, GitConfig, "git"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        _validate(cfg, config_path)

    _merge_env_overrides(cfg)
    return cfg


def _validate(cfg: PathFilterConfig, path: Path) -> None:
    if cfg.filters.predicate_quantifier not in QUANTIFIERS:
        raise ConfigError(
            f"{path}: predicate_quantifier must be one of {QUANTIFIERS}, "
            f"got {cfg.filters.predicate_quantifier!r}"
        )
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"{path}: output format must be one of {OUTPUT_FORMATS}, got {cfg.output.format!r}")
    if cfg.output.list_files not in LIST_FILES_FORMATS:
        raise ConfigError(
            f"{path}: list_files must be one of {LIST_FILES_FORMATS}, got {cfg.output.list_files!r}"
        )


def is_path_input(text: str) -> bool:
    """A filters value without a newline is a file path, otherwise inline YAML."""
    return "\n" not in text


def read_filters_text(value: str, repo_root: Optional[Path] = None) -> str:
    """Return filters YAML from *value*, reading the file when it is a path.

    Relative paths are resolved against *repo_root* when given.
    """
    if not is_path_input(value):
        return value
    path = Path(value)
    if repo_root is not None and not path.is_absolute():
        path = repo_root / path
    if not path.exists():
        raise ConfigError(f"Configuration file '{value}' not found")
    if not path.is_file():
        raise ConfigError(f"'{value}' is not a file.")
    return path.read_text(encoding="utf-8")
