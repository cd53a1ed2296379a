"""
Terminal rendering for comparison results.

Everything here is presentation: the comparison modules hand over plain
dataclasses and this module decides how they look.
"""

import json
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from pagediff.compare import ComparisonReport, TypeComparison
from pagediff.linediff import Change, is_identical
from pagediff.structdiff import DiffKind


def make_console(**kwargs) -> Console:
    return Console(highlight=False, emoji=False, **kwargs)


def header(console: Console, text: str) -> None:
    console.print(f"[bold white on blue] {escape(text)} [/bold white on blue]")


def subheader(console: Console, text: str) -> None:
    console.print(f"[white on cyan] {escape(text)} [/white on cyan]")


def format_path(path: Sequence) -> str:
    """``(0, "offers", 2, "price")`` -> ``[0].offers[2].price``"""
    out = ""
    for key in path:
        if isinstance(key, int):
            out += f"[{key}]"
        else:
            out += f".{key}" if out else str(key)
    return out or "(root)"


def format_value(value, limit: int = 200) -> str:
    text = json.dumps(value, ensure_ascii=False)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def describe_change(change) -> str:
    """
    One-line, markup-free description of a diff entry.

    Entries of a kind this module does not know are described generically
    instead of raising.
    """
    kind = getattr(change, "kind", None)
    path = getattr(change, "path", ())

    if kind is DiffKind.ADDED:
        return f"Added {format_path(path)}: {format_value(change.rhs)}"
    if kind is DiffKind.REMOVED:
        return f"Removed {format_path(path)}: {format_value(change.lhs)}"
    if kind is DiffKind.EDITED:
        return (
            f"Changed {format_path(path)}: "
            f"{format_value(change.lhs)} -> {format_value(change.rhs)}"
        )
    if kind is DiffKind.ARRAY:
        where = format_path(tuple(path) + (change.index,))
        item = getattr(change, "item", None)
        item_kind = getattr(item, "kind", None)
        if item_kind is DiffKind.ADDED:
            return f"Array item added at {where}: {format_value(item.rhs)}"
        if item_kind is DiffKind.REMOVED:
            return f"Array item removed at {where}: {format_value(item.lhs)}"
        if item_kind is DiffKind.EDITED:
            return (
                f"Array item changed at {where}: "
                f"{format_value(item.lhs)} -> {format_value(item.rhs)}"
            )
        return f"Unknown array change at {where}"
    return f"Unknown change at {format_path(path)}"


def _style_for(change) -> str:
    kind = getattr(change, "kind", None)
    if kind is DiffKind.ARRAY:
        kind = getattr(getattr(change, "item", None), "kind", None)
    return {
        DiffKind.ADDED: "green",
        DiffKind.REMOVED: "red",
        DiffKind.EDITED: "yellow",
    }.get(kind, "magenta")


# ─────────────────────────────────────────────────────────────
# Schema mode
# ─────────────────────────────────────────────────────────────

def render_type(console: Console, comparison: TypeComparison) -> None:
    counts = f"({comparison.count_a} vs {comparison.count_b})"
    if comparison.identical:
        console.print(f"[green]✔[/green] [bold]{escape(comparison.type_key)}[/bold] [dim]{counts}[/dim]")
        return

    console.print(f"[red]✘[/red] [bold]{escape(comparison.type_key)}[/bold] [dim]{counts}[/dim]")
    for change in comparison.changes:
        style = _style_for(change)
        console.print(f"   [{style}]{escape(describe_change(change))}[/{style}]")


def render_schema_report(report: ComparisonReport, console: Optional[Console] = None) -> None:
    console = console or make_console()

    console.print()
    header(console, "SCHEMA DIFF RESULTS")
    console.print()

    console.print("[bold]URLs Compared:[/bold]")
    console.print(f"   [blue]URL 1:[/blue] [dim]{escape(report.url_a)}[/dim]")
    console.print(f"   [blue]URL 2:[/blue] [dim]{escape(report.url_b)}[/dim]")
    console.print()

    console.print("[bold]Schema instances:[/bold]")
    console.print(f"   URL 1: {report.total_a}    URL 2: {report.total_b}")
    for key, count_a, count_b in report.type_counts:
        marker = "" if count_a == count_b else "  [yellow](count differs)[/yellow]"
        console.print(f"   [cyan]{escape(key)}[/cyan]: {count_a} vs {count_b}{marker}")
    console.print()

    for warning in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
    if report.warnings:
        console.print()

    subheader(console, "Per-type comparison")
    console.print()
    for comparison in report.comparisons:
        render_type(console, comparison)
    console.print()

    if report.all_types_identical:
        console.print("[green]All schema types are identical![/green]")
    else:
        changed = sum(1 for c in report.comparisons if not c.identical)
        console.print(f"[red]{changed} schema type(s) differ.[/red]")
    console.print()


# ─────────────────────────────────────────────────────────────
# HTML mode
# ─────────────────────────────────────────────────────────────

def _non_blank(value: str) -> List[str]:
    return [line for line in value.split("\n") if line.strip()]


def trim_context(lines: List[str], context: int = 3) -> List[str]:
    """Keep ``context`` lines at each end of a long unchanged run."""
    if len(lines) > 2 * context:
        return lines[:context] + ["..."] + lines[len(lines) - context:]
    return lines


def render_html_diff(
    changes: Sequence[Change],
    url_a: str,
    url_b: str,
    console: Optional[Console] = None,
    context: int = 3
) -> None:
    console = console or make_console()

    console.print()
    header(console, "HTML DIFF RESULTS")
    console.print()

    console.print("[bold]URLs Compared:[/bold]")
    console.print(f"   [blue]URL 1:[/blue] [dim]{escape(url_a)}[/dim]")
    console.print(f"   [blue]URL 2:[/blue] [dim]{escape(url_b)}[/dim]")
    console.print()

    subheader(console, "HTML Content Differences")
    console.print("[dim]   (showing additions and removals from simplified and formatted HTML)[/dim]")
    console.print()

    if is_identical(changes):
        console.print("[green]The simplified HTML content is identical![/green]")
        console.print()
        return

    for part in changes:
        lines = _non_blank(part.value)
        if part.added:
            for line in lines:
                console.print(f"[green]{escape('+ ' + line)}[/green]")
        elif part.removed:
            for line in lines:
                console.print(f"[red]{escape('- ' + line)}[/red]")
        else:
            for line in trim_context(lines, context):
                console.print(f"[dim]{escape('  ' + line)}[/dim]")

    console.print()
