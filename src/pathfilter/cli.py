"""pathfilter CLI — Typer application with match, check, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from pathfilter import __version__

app = typer.Typer(
    name="pathfilter",
    help="Decide which named path filters match the files changed in a commit range.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from pathfilter.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _load_settings(repo_root: Path, config: Optional[str]):
    from pathfilter.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _choice(value: Optional[str], allowed: tuple, label: str) -> Optional[str]:
    if value is None:
        return None
    value = value.lower()
    if value not in allowed:
        console.print(f"[bold red]Invalid {label}:[/bold red] {escape(value)}")
        raise typer.Exit(code=2)
    return value


def _load_filter(cfg, repo_root: Path):
    """Read and parse the filters document, exit 2 on any error."""
    from pathfilter.config.loader import ConfigError, read_filters_text
    from pathfilter.filters.engine import Filter
    from pathfilter.filters.models import PredicateQuantifier
    from pathfilter.filters.parser import FilterError

    try:
        text = read_filters_text(cfg.filters.filters, repo_root)
        return Filter.from_yaml(text, PredicateQuantifier(cfg.filters.predicate_quantifier))
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except FilterError as exc:
        console.print(f"[bold red]Filter error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


# ── match ─────────────────────────────────────────────────────────────────────


@app.command()
def match(
    filters: Optional[str] = typer.Option(None, "--filters", "-f", help="Filters YAML file, or inline YAML"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Branch, tag or sha to compare against"),
    head: Optional[str] = typer.Option(None, "--head", help="Ref whose changes are listed (default HEAD)"),
    list_files: Optional[str] = typer.Option(None, "--list-files", "-l", help="File list format: none | csv | json | shell | escape"),
    format: Optional[str] = typer.Option(None, "--format", help="Report format: terminal | json | outputs"),
    quantifier: Optional[str] = typer.Option(None, "--quantifier", "-q", help="How clauses combine: some | every"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Append name=value outputs to this file (e.g. $GITHUB_OUTPUT)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .pathfilter.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log change detection decisions"),
    debug: bool = typer.Option(False, "--debug", help="Log every parsed rule and match"),
) -> None:
    """Match the files changed since BASE against every filter."""
    from pathfilter.config.schema import LIST_FILES_FORMATS, OUTPUT_FORMATS, QUANTIFIERS
    from pathfilter.git.adapter import GitError, get_changed_files
    from pathfilter.output import json_report, terminal
    from pathfilter.output.list_format import ListFormat
    from pathfilter.output.outputs import build_outputs, format_outputs, write_outputs
    from pathfilter.results.aggregator import summarize

    _configure_logging(verbose, debug)
    repo_root = _resolve_repo_root()
    cfg = _load_settings(repo_root, config)

    # --- CLI overrides ---
    if filters:
        cfg.filters.filters = filters
    if base is not None:
        cfg.git.base = base
    if head:
        cfg.git.head = head
    cfg.output.list_files = _choice(list_files, LIST_FILES_FORMATS, "list-files format") or cfg.output.list_files
    cfg.output.format = _choice(format, OUTPUT_FORMATS, "format") or cfg.output.format
    cfg.filters.predicate_quantifier = (
        _choice(quantifier, QUANTIFIERS, "quantifier") or cfg.filters.predicate_quantifier
    )

    path_filter = _load_filter(cfg, repo_root)

    try:
        files = get_changed_files(repo_root, cfg.git.base or None, cfg.git.head)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    summary = summarize(path_filter.match(files))
    list_format = ListFormat(cfg.output.list_files)
    outputs = build_outputs(summary, list_format)

    if cfg.output.format == "terminal":
        terminal.render(summary, changed_files=len(files), console=console)
    elif cfg.output.format == "json":
        print(json_report.render(summary, changed_files=len(files), list_files=list_format))
    elif cfg.output.format == "outputs":
        print(format_outputs(outputs), end="")

    if output:
        write_outputs(outputs, Path(output))
        if verbose:
            console.print(f"[dim]Outputs written to {output}[/dim]")

    raise typer.Exit(code=0)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    filters: Optional[str] = typer.Option(None, "--filters", "-f", help="Filters YAML file, or inline YAML"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .pathfilter.toml"),
) -> None:
    """Validate the filters document and list its rules."""
    _configure_logging(False, False)
    repo_root = _resolve_repo_root()
    cfg = _load_settings(repo_root, config)
    if filters:
        cfg.filters.filters = filters

    path_filter = _load_filter(cfg, repo_root)
    rules = path_filter.config.rules
    console.print(f"[green]✓[/green] {len(rules)} filter(s) loaded")
    for name, items in rules.items():
        patterns = ", ".join(
            f"{'|'.join(sorted(s.value for s in item.statuses))}: {item.pattern}"
            if item.statuses
            else item.pattern
            for item in items
        )
        console.print(f"  [cyan]{escape(name)}[/cyan] ({len(items)}): {escape(patterns)}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    with_filters: bool = typer.Option(False, "--with-filters", help="Also write a sample .github/filters.yml"),
) -> None:
    """Generate a starter .pathfilter.toml in the repo root."""
    from pathfilter.config.defaults import DEFAULT_TOML, SAMPLE_FILTERS
    from pathfilter.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")

    if with_filters:
        filters_path = repo_root / ".github" / "filters.yml"
        if filters_path.exists():
            console.print(f"[yellow]⚠[/yellow]  {filters_path} already exists, left untouched")
        else:
            filters_path.parent.mkdir(parents=True, exist_ok=True)
            filters_path.write_text(SAMPLE_FILTERS, encoding="utf-8")
            console.print(f"[green]✓[/green] Created {filters_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"pathfilter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """pathfilter — decide which filters match the files you changed."""
