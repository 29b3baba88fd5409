"""
Compiler collaborator protocol and compilation results.

The build core never links against a compiler. It hands a list of source
files and an option list to whatever implements ``Compiler`` and gets back a
``CompileResult``. ``JavacCompiler`` is the production implementation; tests
inject fakes.

Architecture:
    ::

        BuildOrchestrator ── compile(files, options) ──► Compiler
                 ▲                                          │
                 └────────────── CompileResult ◄────────────┘
                 │
                 ▼
        CompilationResult(OK | NOOP | ERROR, source_files, duration, ...)

Tags:
    compiler, protocol, dependency-injection, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from modkit.compiler.diagnostics import Diagnostic, DiagnosticKind, render_transcript


@dataclass(frozen=True)
class CompileResult:
    """What a ``Compiler`` reports back."""

    success: bool
    diagnostics: tuple[Diagnostic, ...] = ()
    captured_output: str = ""


@runtime_checkable
class Compiler(Protocol):
    """External compiler collaborator."""

    def compile(self, source_files: Sequence[Path], options: Sequence[str]) -> CompileResult: ...


class ResultType(str, Enum):
    """Outcome of one compilation step of a build."""

    OK = "OK"
    NOOP = "NOOP"
    ERROR = "ERROR"


@dataclass(frozen=True)
class CompilationResult:
    """
    The build's view of one compilation step.

    NOOP means the staleness check found nothing to do and the compiler was
    never called.
    """

    result_type: ResultType
    destination: Path
    source_files: int = 0
    duration: float = 0.0
    diagnostics: tuple[Diagnostic, ...] = ()
    captured_output: str = ""

    @property
    def success(self) -> bool:
        return self.result_type is not ResultType.ERROR

    @property
    def message(self) -> str:
        """Compiler-style transcript of the diagnostics."""
        return render_transcript(self.diagnostics, self.captured_output)

    @classmethod
    def noop(cls, destination: Path, duration: float = 0.0) -> CompilationResult:
        return cls(result_type=ResultType.NOOP, destination=destination, duration=duration)

    @classmethod
    def from_compile(
        cls,
        result: CompileResult,
        *,
        destination: Path,
        source_files: int,
        duration: float,
    ) -> CompilationResult:
        failed = not result.success or any(d.kind is DiagnosticKind.ERROR for d in result.diagnostics)
        return cls(
            result_type=ResultType.ERROR if failed else ResultType.OK,
            destination=destination,
            source_files=source_files,
            duration=duration,
            diagnostics=tuple(result.diagnostics),
            captured_output=result.captured_output,
        )


__all__ = ["CompileResult", "Compiler", "ResultType", "CompilationResult"]
