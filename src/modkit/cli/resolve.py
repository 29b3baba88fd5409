"""
CLI: ``modkit resolve`` - print the dependency closure of an artifact.
"""

from __future__ import annotations

import os

import typer

from modkit.cli.utils import fail, fail_with, load_settings, print_json, print_table
from modkit.core.errors import ModkitError
from modkit.packaging.artifacts import ArtifactID, SearchPath
from modkit.packaging.resolver import DependencyClosureResolver


def resolve_closure(
    root: str = typer.Argument(..., help="Root artifact, NAME@VERSION."),
    search_path: list[str] = typer.Option([], "--path", "-p", help="Search path entries."),
    json_out: bool = typer.Option(False, "--json", help="Print the closure as JSON."),
) -> None:
    """Resolve the transitive closure of ROOT over the search path."""
    settings = load_settings()
    try:
        root_id = ArtifactID.parse(root)
    except ValueError as e:
        fail(str(e))

    entries = SearchPath.of(part for entry in search_path for part in entry.split(os.pathsep) if part)
    try:
        closure = DependencyClosureResolver(settings).resolve(root_id, entries)
    except (ModkitError, OSError) as e:
        fail_with(e)

    rows = [info.to_dict() for info in sorted(closure.values(), key=lambda i: str(i.id))]
    if json_out:
        print_json(rows)
    else:
        print_table(rows, title=f"Closure of {root_id}")
