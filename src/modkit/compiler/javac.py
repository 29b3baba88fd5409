"""
Subprocess-backed compiler adapter.

Runs a ``javac``-compatible executable and parses its transcript back into
``Diagnostic`` values::

    src/com/example/Main.java:7: error: cannot find symbol      ← header
            Strin name = "x";                                  ← source echo
            ^                                                  ← caret → column
      symbol:   class Strin                                    ← continuation
    1 error                                                    ← totals (dropped)

Anything the parser does not recognize ends up in ``captured_output``.

Tags:
    compiler, javac, subprocess, transcript-parsing, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import os
import re
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modkit.compiler.diagnostics import Diagnostic, DiagnosticKind, SourceRef
from modkit.compiler.protocol import CompileResult
from modkit.core.errors import UserError
from modkit.core.logging import get_logger

logger = get_logger(__name__)

_HEADER = re.compile(r"^(?P<path>.+?):(?P<line>\d+): (?P<kind>error|warning): (?P<message>.*)$")
_SOURCELESS = re.compile(r"^(?P<kind>error|warning): (?P<message>.*)$")
_TOTALS = re.compile(r"^\d+ (?:error|warning)s?$")
_CARET = re.compile(r"^\s*\^\s*$")
_CODE = re.compile(r"^\[(?P<code>[\w.-]+)\] (?P<message>.*)$")


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompileSpec:
    """
    Everything that determines a compiler invocation besides the file list.

    Attributes:
        class_dir: Output directory (``-d``)
        version: Module version (``--module-version``)
        module_path: Module path entries (``-p``)
        options: Raw options passed first, e.g. ``-Werror``
        warnings: ``"all"`` for ``-Xlint``, else ``-Xlint:<warnings>``; None disables
        debug: ``""`` for ``-g``, else ``-g:<debug>``; None disables
        release: ``--release`` target
        patches: ``(module, archive)`` pairs for ``--patch-module``
    """

    class_dir: Path
    version: str
    module_path: tuple[Path, ...] = ()
    options: tuple[str, ...] = ()
    warnings: str | None = "all"
    debug: str | None = None
    release: int | None = None
    patches: tuple[tuple[str, Path], ...] = field(default_factory=tuple)

    def to_options(self) -> list[str]:
        return ["-d", str(self.class_dir), *self.checksum_options()]

    def checksum_options(self) -> list[str]:
        """Options without the output directory, which never feeds the checksum."""
        result: list[str] = []
        if self.module_path:
            result += ["-p", os.pathsep.join(str(p) for p in self.module_path)]
        result += list(self.options)
        if self.warnings is not None:
            result.append("-Xlint" if self.warnings == "all" else f"-Xlint:{self.warnings}")
        if self.debug is not None:
            result.append("-g" if self.debug == "" else f"-g:{self.debug}")
        if self.release is not None:
            result += ["--release", str(self.release)]
        result += ["--module-version", self.version]
        for module, archive in self.patches:
            result += ["--patch-module", f"{module}={archive}"]
        return result


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


class JavacCompiler:
    """Runs ``executable`` in a subprocess; implements ``Compiler``."""

    def __init__(self, executable: str = "javac"):
        self.executable = executable

    def compile(self, source_files: Sequence[Path], options: Sequence[str]) -> CompileResult:
        command = [self.executable, *options, *(str(f) for f in source_files)]
        logger.info("compiler.command", command=shlex.join(command))
        try:
            completed = subprocess.run(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise UserError(f"Compiler not found: {self.executable}", cause=e) from e

        diagnostics, captured = parse_transcript(completed.stderr)
        if completed.stdout:
            captured = completed.stdout + captured
        return CompileResult(
            success=completed.returncode == 0,
            diagnostics=tuple(diagnostics),
            captured_output=captured,
        )


# ---------------------------------------------------------------------------
# Transcript parsing
# ---------------------------------------------------------------------------


@dataclass
class _Pending:
    kind: DiagnosticKind
    message: list[str]
    path: str | None = None
    line: int | None = None
    column: int | None = None
    code: str | None = None
    echo_seen: bool = False

    def build(self) -> Diagnostic:
        source = SourceRef(self.path, self.line, self.column) if self.path is not None else None
        return Diagnostic(kind=self.kind, message="\n".join(self.message), source=source, code=self.code)


def _start(kind: str, message: str, path: str | None = None, line: int | None = None) -> _Pending:
    code = None
    if kind == "warning":
        match = _CODE.match(message)
        if match:
            code, message = match["code"], match["message"]
    return _Pending(
        kind=DiagnosticKind.ERROR if kind == "error" else DiagnosticKind.WARNING,
        message=[message],
        path=path,
        line=line,
        code=code,
    )


def parse_transcript(text: str) -> tuple[list[Diagnostic], str]:
    """
    Split compiler output into diagnostics and leftover output.

    Returns:
        ``(diagnostics, captured_output)``; totals lines are dropped
    """
    diagnostics: list[Diagnostic] = []
    captured: list[str] = []
    current: _Pending | None = None

    def flush() -> None:
        nonlocal current
        if current is not None:
            diagnostics.append(current.build())
            current = None

    for raw in text.splitlines():
        if match := _HEADER.match(raw):
            flush()
            current = _start(match["kind"], match["message"], match["path"], int(match["line"]))
        elif match := _SOURCELESS.match(raw):
            flush()
            current = _start(match["kind"], match["message"])
        elif _TOTALS.match(raw):
            flush()
        elif current is not None and current.line is not None and not current.echo_seen:
            current.echo_seen = True
        elif current is not None and current.column is None and current.echo_seen and _CARET.match(raw):
            current.column = raw.index("^") + 1
        elif current is not None and raw[:1].isspace():
            current.message.append(raw)
        else:
            flush()
            captured.append(raw)

    flush()
    return diagnostics, "".join(line + "\n" for line in captured)


__all__ = ["CompileSpec", "JavacCompiler", "parse_transcript"]
