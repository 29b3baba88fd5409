"""
Root Typer application for the modkit CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="modkit",
    help="modkit: incremental compilation and packaging of modules.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from modkit import __version__

        typer.echo(f"modkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """modkit CLI: build modules, resolve closures."""


# ── Commands ─────────────────────────────────────────────────────────────

from modkit.cli.make import make_module  # noqa: E402
from modkit.cli.resolve import resolve_closure  # noqa: E402

app.command("make")(make_module)
app.command("resolve")(resolve_closure)
