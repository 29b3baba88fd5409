"""
Compiler diagnostics and transcript rendering.

A ``Diagnostic`` is one message from the compiler: an error, a warning, or
a note, optionally tied to a line of a source file. ``render_transcript``
turns a list of them back into the familiar compiler output::

    src/com/example/Main.java:7: error: cannot find symbol
            Strin name = "x";
            ^
      symbol:   class Strin
    1 error

Tags:
    compiler, diagnostics, transcript, modkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from modkit.core.logging import get_logger

logger = get_logger(__name__)


class DiagnosticKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    MANDATORY_WARNING = "mandatory_warning"
    NOTE = "note"
    OTHER = "other"

    @property
    def is_warning(self) -> bool:
        return self in (DiagnosticKind.WARNING, DiagnosticKind.MANDATORY_WARNING)


@dataclass(frozen=True)
class SourceRef:
    """Location of a diagnostic. ``line`` and ``column`` are 1-based."""

    name: str
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    source: SourceRef | None = None
    code: str | None = None

    def to_dict(self) -> dict:
        result = {"kind": self.kind.value, "message": self.message}
        if self.source is not None:
            result["source"] = self.source.name
            if self.source.line is not None:
                result["line"] = self.source.line
            if self.source.column is not None:
                result["column"] = self.source.column
        if self.code is not None:
            result["code"] = self.code
        return result


def render_transcript(diagnostics: Sequence[Diagnostic], captured_output: str = "") -> str:
    """
    Render diagnostics the way the compiler itself prints them.

    Each diagnostic becomes ``path:line: kind: message`` (the location prefix
    only when a line is known), followed by the offending source line and a
    caret under the column when the source file can be read. Totals such as
    ``2 errors`` and ``1 warning`` follow, then ``captured_output`` verbatim.

    Args:
        diagnostics: Diagnostics in reporting order
        captured_output: Compiler output that is not part of any diagnostic

    Returns:
        The transcript, newline terminated unless empty
    """
    errors = 0
    warnings = 0
    lines: list[str] = []

    for diagnostic in diagnostics:
        if diagnostic.kind is DiagnosticKind.ERROR:
            errors += 1
        elif diagnostic.kind.is_warning:
            warnings += 1

        prefix = ""
        source = diagnostic.source
        if source is not None and source.line is not None:
            prefix = f"{source.name}:{source.line}: "

        if diagnostic.kind is DiagnosticKind.ERROR:
            prefix += "error: "
        elif diagnostic.kind.is_warning:
            prefix += "warning: "
            if diagnostic.code:
                prefix += f"[{diagnostic.code.rsplit('.', 1)[-1]}] "
        elif diagnostic.kind is DiagnosticKind.NOTE:
            prefix += "Note: "

        first, *rest = diagnostic.message.split("\n")
        lines.append(prefix + first)

        if source is not None and source.line is not None:
            echoed = _source_line(source.name, source.line)
            if echoed is not None:
                lines.append(echoed)
                if source.column is not None:
                    lines.append(" " * max(source.column - 1, 0) + "^")

        lines.extend(rest)

    if errors:
        lines.append(f"{errors} error" if errors == 1 else f"{errors} errors")
    if warnings:
        lines.append(f"{warnings} warning" if warnings == 1 else f"{warnings} warnings")

    transcript = "".join(line + "\n" for line in lines)
    return transcript + captured_output


def _source_line(name: str, line: int) -> str | None:
    try:
        content = Path(name).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("diagnostics.source_unreadable", source=name, error=str(e))
        return None
    source_lines = content.splitlines()
    if 1 <= line <= len(source_lines):
        return source_lines[line - 1]
    return None


__all__ = ["DiagnosticKind", "SourceRef", "Diagnostic", "render_transcript"]
