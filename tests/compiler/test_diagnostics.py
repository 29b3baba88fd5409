"""Tests for modkit.compiler.diagnostics."""

from modkit.compiler.diagnostics import Diagnostic, DiagnosticKind, SourceRef, render_transcript


class TestRenderTranscript:
    """Rendering follows the compiler's own transcript format."""

    def test_error_with_source_echo_and_caret(self, tmp_path):
        source = tmp_path / "A.java"
        source.write_text("class A {\n    Strin s;\n}\n")
        diagnostic = Diagnostic(DiagnosticKind.ERROR, "cannot find symbol\n  symbol: class Strin", SourceRef(str(source), 2, 5))

        assert render_transcript([diagnostic]) == (
            f"{source}:2: error: cannot find symbol\n"
            "    Strin s;\n"
            "    ^\n"
            "  symbol: class Strin\n"
            "1 error\n"
        )

    def test_warning_code_uses_last_segment(self):
        diagnostic = Diagnostic(DiagnosticKind.WARNING, "deprecated API", code="compiler.warn.lint.deprecation")
        assert render_transcript([diagnostic]) == "warning: [deprecation] deprecated API\n1 warning\n"

    def test_unreadable_source_skips_echo(self, tmp_path):
        diagnostic = Diagnostic(DiagnosticKind.ERROR, "boom", SourceRef(str(tmp_path / "gone.java"), 3, 1))
        assert render_transcript([diagnostic]) == f"{tmp_path / 'gone.java'}:3: error: boom\n1 error\n"

    def test_totals_are_pluralized(self):
        diagnostics = [Diagnostic(DiagnosticKind.ERROR, "a"), Diagnostic(DiagnosticKind.ERROR, "b")]
        diagnostics.append(Diagnostic(DiagnosticKind.MANDATORY_WARNING, "c"))
        transcript = render_transcript(diagnostics)
        assert transcript.endswith("2 errors\n1 warning\n")

    def test_note_and_captured_output(self):
        diagnostic = Diagnostic(DiagnosticKind.NOTE, "Some input files use unchecked operations.")
        transcript = render_transcript([diagnostic], captured_output="extra\n")
        assert transcript == "Note: Some input files use unchecked operations.\nextra\n"

    def test_empty(self):
        assert render_transcript([]) == ""


class TestDiagnostic:
    def test_to_dict(self):
        diagnostic = Diagnostic(DiagnosticKind.WARNING, "w", SourceRef("A.java", 1, 2), code="x.y")
        assert diagnostic.to_dict() == {
            "kind": "warning",
            "message": "w",
            "source": "A.java",
            "line": 1,
            "column": 2,
            "code": "x.y",
        }

    def test_warning_kinds(self):
        assert DiagnosticKind.MANDATORY_WARNING.is_warning
        assert not DiagnosticKind.NOTE.is_warning
