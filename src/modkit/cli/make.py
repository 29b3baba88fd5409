"""
CLI: ``modkit make`` - compile and package one module.
"""

from __future__ import annotations

import os
from pathlib import Path

import typer
from pydantic import ValidationError

from modkit.build.orchestrator import create_orchestrator
from modkit.build.params import BuildParams, ProgramSpec
from modkit.cli.utils import fail, fail_with, load_settings, print_json, print_milestone
from modkit.core.result import Err, Ok


def _split_path(entries: list[str]) -> list[Path]:
    return [Path(part) for entry in entries for part in entry.split(os.pathsep) if part]


def _program(text: str) -> ProgramSpec:
    filename, _, main_class = text.partition("=")
    return ProgramSpec(filename=filename, main_class=main_class or None)


def make_module(
    source: Path | None = typer.Option(None, "--source", "-s", help="Source directory holding the module declaration."),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output directory (created and claimed)."),
    module_version: str | None = typer.Option(None, "--module-version", "-v", help="Module version."),
    name: str | None = typer.Option(None, "--name", "-n", help="Module name; read from the declaration if omitted."),
    module_path: list[str] = typer.Option([], "--module-path", "-p", help="Module path entries."),
    requires: list[str] = typer.Option([], "--requires", "-r", help="Required artifact, NAME@VERSION."),
    resources: list[Path] = typer.Option([], "--resources", help="Resource directory to package."),
    test_source: Path | None = typer.Option(None, "--test-source", help="Test source directory."),
    test_resources: list[Path] = typer.Option([], "--test-resources", help="Test resource directory."),
    main_class: str | None = typer.Option(None, "--main-class", "-m", help="Main class; '.X' is relative to the module."),
    program: list[str] = typer.Option([], "--program", "-P", help="Program to write, FILENAME[=MAINCLASS]."),
    debug: str | None = typer.Option(None, "--debug", "-g", help="Debug info: '' for all, or e.g. 'lines,source'."),
    warnings: str = typer.Option("all", "--warnings", "-W", help="Lint warnings to enable, or 'none'."),
    release: int | None = typer.Option(None, "--release", help="Target platform release."),
    option: list[str] = typer.Option([], "--option", "-O", help="Raw compiler option; replaces the defaults."),
    force: bool = typer.Option(False, "--force", "-f", help="Recompile even when up to date."),
    compiler: str | None = typer.Option(None, "--compiler", help="Compiler executable."),
    bundle_base: Path | None = typer.Option(None, "--bundle-base", help="Launcher runtime archive for programs."),
    json_out: bool = typer.Option(False, "--json", help="Print the build report as JSON."),
) -> None:
    """Compile and package one module."""
    settings = load_settings(compiler_executable=compiler, bundle_base=bundle_base)

    overrides = {"options": option} if option else {}
    try:
        params = BuildParams(
            source_dir=source,
            out=out,
            version=module_version,
            module_name=name,
            module_path=_split_path(module_path),
            requires=requires,
            resource_dirs=resources,
            test_source_dir=test_source,
            test_resource_dirs=test_resources,
            main_class=main_class,
            programs=[_program(p) for p in program],
            debug=debug,
            warnings=None if warnings == "none" else warnings,
            release=release,
            force=force,
            **overrides,
        )
    except (ValidationError, ValueError) as e:
        fail(str(e))

    try:
        outcome = create_orchestrator(settings).run(params)
    except OSError as e:
        fail_with(e)

    match outcome:
        case Ok(report):
            if json_out:
                print_json(
                    {
                        "module": report.module,
                        "version": report.version,
                        "compilation": report.compilation.result_type.value,
                        "source_files": report.compilation.source_files,
                        "archive": report.archive.to_dict(),
                        "programs": [str(p) for p in report.programs],
                    }
                )
                return
            for line in report.milestones():
                print_milestone(line)
        case Err(error):
            fail_with(error)
