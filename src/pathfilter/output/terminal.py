"""Rich terminal reporter — one row per filter, matching files listed."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pathfilter.results.models import ResultSummary, RuleSummary

_MAX_LISTED = 10

_STATUS_STYLE = {
    "added": "green",
    "copied": "cyan",
    "deleted": "red",
    "modified": "yellow",
    "renamed": "blue",
    "unmerged": "magenta",
}


def _changed_pill(changed: bool) -> Text:
    if changed:
        return Text(" CHANGED ", style="bold black on green")
    return Text(" - ", style="dim")


def _files_cell(rule: RuleSummary) -> Text:
    text = Text()
    for idx, f in enumerate(rule.files[:_MAX_LISTED]):
        if idx:
            text.append("\n")
        text.append(f.filename)
        text.append(f" [{f.status.value}]", style=_STATUS_STYLE.get(f.status.value, ""))
    hidden = rule.count - _MAX_LISTED
    if hidden > 0:
        text.append(f"\n… {hidden} more", style="dim")
    return text


def render(summary: ResultSummary, *, changed_files: int = 0, console: Console | None = None) -> None:
    """Print filter results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not summary.rules:
        console.print("[dim]No filters configured.[/dim]")
        return

    table = Table(
        title="Path Filters",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Filter", style="cyan", min_width=12)
    table.add_column("Result", justify="center", width=11)
    table.add_column("Files", justify="right", style="green")
    table.add_column("Matching files")

    for rule in summary.rules:
        table.add_row(Text(rule.name), _changed_pill(rule.has_match), str(rule.count), _files_cell(rule))

    console.print(table)
    console.print()
    console.print(f"[dim]Changed files:[/dim]  {changed_files}")
    changed = ", ".join(summary.changed_rule_names) or "none"
    console.print(f"[dim]Changed filters:[/dim] {escape(changed)}")
    for name in summary.collisions:
        console.print(f"[yellow]⚠[/yellow]  Output name [bold]{escape(name)}[/bold] is used twice; kept the first value")
