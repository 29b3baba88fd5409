"""Compiler collaborator: protocol, diagnostics, javac adapter."""

from modkit.compiler.diagnostics import Diagnostic, DiagnosticKind, SourceRef, render_transcript
from modkit.compiler.javac import CompileSpec, JavacCompiler
from modkit.compiler.protocol import CompilationResult, CompileResult, Compiler, ResultType

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "SourceRef",
    "render_transcript",
    "CompileSpec",
    "JavacCompiler",
    "CompilationResult",
    "CompileResult",
    "Compiler",
    "ResultType",
]
