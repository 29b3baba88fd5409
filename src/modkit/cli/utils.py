"""
CLI utility helpers: consoles, settings overrides and error output.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from modkit.core.errors import categorize_error
from modkit.core.logging import configure_logging
from modkit.core.settings import ModkitSettings, get_settings

console = Console()
err_console = Console(stderr=True)


# ── Settings ─────────────────────────────────────────────────────────────


def load_settings(**overrides: Any) -> ModkitSettings:
    """Cached settings with the non-None ``overrides`` applied, logging configured."""
    settings = get_settings()
    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        settings = ModkitSettings(**{**settings.model_dump(), **updates})
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")
    return settings


# ── Output helpers ───────────────────────────────────────────────────────


def fail(message: str, *, category: str = "USER") -> NoReturn:
    """Print a red error line and exit with code 1."""
    err_console.print(f"[bold red]Error[/bold red] ({category}):", end=" ")
    err_console.print(message, markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


def fail_with(error: Exception) -> NoReturn:
    fail(str(error), category=categorize_error(error).value)


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_milestone(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(", ".join(v) if isinstance(v, list) else str(v) for v in row.values()))
    console.print(table)
