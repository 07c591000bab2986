from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Columns holding whole source rows; too wide for a terminal table.
_HIDDEN_COLUMNS = {"row"}

_BAND_STYLES = {
    "Excellent": "bold green",
    "Good": "green",
    "Fair": "yellow",
    "Poor": "red",
}

_STATUS_STYLES = {
    "Exception": "bold red",
    "Warning": "yellow",
    "Significant Change": "yellow",
    "Only in System A": "magenta",
    "Only in System B": "magenta",
    "Review Required": "red",
    "Needs Improvement": "yellow",
}


def _format_cell(value: Any) -> str:
    if value is None:
        return "[dim]n/a[/dim]"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    text = escape(str(value))
    style = _BAND_STYLES.get(text) or _STATUS_STYLES.get(text)
    return f"[{style}]{text}[/{style}]" if style else text


def print_run_summary(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render one line per check: rows produced, duration and failure reason.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(title="Data Quality & Reconciliation Run", box=box.ROUNDED)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Duration (ms)", justify="right", style="green")
    table.add_column("Status")

    for res in results:
        profile = res.get("profile") or {}
        duration_ms = (profile.get("duration_seconds") or 0.0) * 1000
        error = res.get("error")
        status = f"[red]FAILED: {escape(error)}[/red]" if error else "[green]OK[/green]"
        table.add_row(
            res.get("check", "unknown"), f"{res.get('rows', 0):,}", f"{duration_ms:.1f}", status
        )

    console.print(table)


def print_records(
    title: str,
    records: List[Dict[str, Any]],
    columns: Optional[Sequence[str]] = None,
    limit: int = 20,
    console: Optional[Console] = None,
) -> None:
    """
    Render a record set (as produced by a check) as a table, truncated to
    `limit` rows.
    """
    console = console or Console()
    if not records:
        console.print(f"[dim]{title}: no rows.[/dim]")
        return

    if columns is None:
        seen: Dict[str, None] = {}
        for record in records:
            seen.update(dict.fromkeys(k for k in record if k not in _HIDDEN_COLUMNS))
        columns = list(seen)

    shown = records[:limit] if limit > 0 else records
    caption = f"{len(shown)} of {len(records)} row(s)" if len(shown) < len(records) else None
    table = Table(title=title, box=box.SIMPLE_HEAVY, caption=caption)
    for column in columns:
        table.add_column(column.replace("_", " ").title(), overflow="fold")
    for record in shown:
        table.add_row(*(_format_cell(record.get(column)) for column in columns))

    console.print(table)
