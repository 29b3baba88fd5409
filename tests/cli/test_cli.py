"""Tests for modkit.cli: commands driven through typer.testing.CliRunner.

``make`` runs with a fake compiler swapped in for ``create_orchestrator``;
``resolve`` runs against real artifacts on disk.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from modkit import __version__
from modkit.cli.app import app
from modkit.compiler.diagnostics import Diagnostic, DiagnosticKind
from tests._support.fakes import FakeCompiler, orchestrator_with
from tests._support.trees import write_artifact

runner = CliRunner()


@pytest.fixture(autouse=True)
def keep_logging(monkeypatch):
    """Loggers stay bound to the session stream rather than the runner's."""
    monkeypatch.setattr("modkit.cli.utils.configure_logging", lambda **kwargs: None)


@pytest.fixture
def wired(monkeypatch, fake_compiler):
    """Route ``make`` through the fake compiler; records the settings used."""
    seen = {}

    def factory(settings):
        seen["settings"] = settings
        return orchestrator_with(fake_compiler, settings)

    monkeypatch.setattr("modkit.cli.make.create_orchestrator", factory)
    return seen


def make_args(tree, *extra):
    return ["make", "-s", str(tree.src), "-o", str(tree.out), "-v", "1.2.3", *extra]


# ─── Root app ────────────────────────────────────────────────────────────


class TestApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "make" in result.output
        assert "resolve" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"modkit {__version__}"


# ─── make ────────────────────────────────────────────────────────────────


class TestMake:
    def test_milestones(self, wired, module_tree):
        result = runner.invoke(app, make_args(module_tree))
        assert result.exit_code == 0, result.output
        assert "compiled 2 source files" in result.output
        assert "com.example.app@1.2.3.jar" in result.output

    def test_second_run_reports_up_to_date(self, wired, module_tree, fake_compiler):
        runner.invoke(app, make_args(module_tree))
        result = runner.invoke(app, make_args(module_tree))
        assert result.exit_code == 0
        assert "[up to date]" in result.output
        assert len(fake_compiler.calls) == 1

    def test_json(self, wired, module_tree):
        result = runner.invoke(app, make_args(module_tree, "--json"))
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["module"] == "com.example.app"
        assert payload["compilation"] == "OK"
        assert payload["source_files"] == 2

    def test_options_replace_defaults(self, wired, module_tree, fake_compiler):
        result = runner.invoke(app, make_args(module_tree, "-O", "-parameters", "-W", "none", "-g", "lines"))
        assert result.exit_code == 0, result.output
        options = fake_compiler.calls[0].options
        assert "-parameters" in options
        assert "-Werror" not in options
        assert not any(o.startswith("-Xlint") for o in options)
        assert "-g:lines" in options

    def test_compiler_override(self, wired, module_tree, monkeypatch):
        monkeypatch.setenv("MODKIT_COMPILER_EXECUTABLE", "/env/javac")
        runner.invoke(app, make_args(module_tree, "--compiler", "/opt/jdk/bin/javac"))
        assert wired["settings"].compiler_executable == "/opt/jdk/bin/javac"

    def test_compiler_from_environment(self, wired, module_tree, monkeypatch):
        monkeypatch.setenv("MODKIT_COMPILER_EXECUTABLE", "/env/javac")
        runner.invoke(app, make_args(module_tree))
        assert wired["settings"].compiler_executable == "/env/javac"

    def test_missing_version(self, wired, module_tree):
        result = runner.invoke(app, ["make", "-s", str(module_tree.src), "-o", str(module_tree.out)])
        assert result.exit_code == 1
        assert "(USER)" in result.output
        assert "Missing module version" in result.output

    def test_invalid_requirement(self, wired, module_tree):
        result = runner.invoke(app, make_args(module_tree, "-r", "lib@"))
        assert result.exit_code == 1
        assert "Invalid artifact id" in result.output

    def test_invalid_program(self, wired, module_tree):
        result = runner.invoke(app, make_args(module_tree, "-P", "bin/app"))
        assert result.exit_code == 1
        assert "plain file name" in result.output

    def test_program_without_bundle_base(self, wired, module_tree):
        result = runner.invoke(app, make_args(module_tree, "-m", ".Main", "-P", "app"))
        assert result.exit_code == 1
        assert "No bundle base archive configured" in result.output

    def test_compile_failure(self, monkeypatch, module_tree):
        compiler = FakeCompiler(success=False, diagnostics=(Diagnostic(DiagnosticKind.ERROR, "boom"),))
        monkeypatch.setattr("modkit.cli.make.create_orchestrator", lambda s: orchestrator_with(compiler, s))
        result = runner.invoke(app, make_args(module_tree))
        assert result.exit_code == 1
        assert "(COMPILATION)" in result.output
        assert "error: boom" in result.output

    def test_io_failure(self, monkeypatch, module_tree):
        def denied(call):
            raise PermissionError(f"Permission denied: '{call.class_dir}'")

        compiler = FakeCompiler(side_effect=denied)
        monkeypatch.setattr("modkit.cli.make.create_orchestrator", lambda s: orchestrator_with(compiler, s))
        result = runner.invoke(app, make_args(module_tree))
        assert result.exit_code == 1
        assert "Error (IO)" in result.output
        assert "Permission denied" in result.output


# ─── resolve ─────────────────────────────────────────────────────────────


class TestResolve:
    @pytest.fixture
    def repo(self, tmp_path):
        repo = tmp_path / "repo"
        write_artifact(repo, "app", "1", [("lib", "2")])
        write_artifact(repo, "lib", "2")
        return repo

    def test_json(self, repo):
        result = runner.invoke(app, ["resolve", "app@1", "-p", str(repo), "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["id"] for row in rows] == ["app@1", "lib@2"]
        assert rows[0]["requires"] == ["lib@2"]

    def test_table(self, repo):
        result = runner.invoke(app, ["resolve", "app@1", "-p", str(repo)])
        assert result.exit_code == 0
        assert "lib@2" in result.output

    def test_not_found(self, repo):
        result = runner.invoke(app, ["resolve", "other@1", "-p", str(repo)])
        assert result.exit_code == 1
        assert "(DEPENDENCY)" in result.output

    def test_invalid_root(self):
        result = runner.invoke(app, ["resolve", "app@"])
        assert result.exit_code == 1
        assert "Invalid artifact id" in result.output

    def test_io_failure(self, repo, monkeypatch):
        def unreadable(self, root, search_path):
            raise OSError(f"cannot read {repo}")

        monkeypatch.setattr("modkit.cli.resolve.DependencyClosureResolver.resolve", unreadable)
        result = runner.invoke(app, ["resolve", "app@1", "-p", str(repo)])
        assert result.exit_code == 1
        assert "Error (IO)" in result.output
