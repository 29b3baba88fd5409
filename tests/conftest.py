"""
Shared pytest fixtures and configuration for modkit tests.

This module provides:
- Settings and logging isolation between tests
- A module source tree builder
- Fake compilers for orchestration tests

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.

    def test_build(module_tree, fake_compiler):
        ...
"""

import os
import sys
from pathlib import Path

import pytest

# Ensure modkit package and tests._support are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from modkit.core.logging import configure_logging
from modkit.core.settings import ModkitSettings, clear_settings_cache
from tests._support.fakes import FakeCompiler
from tests._support.trees import ModuleTree


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = item.path.relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow", "golden"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop cached settings and MODKIT_* variables around every test."""
    for key in list(os.environ):
        if key.startswith("MODKIT_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    configure_logging(level="WARNING", json_format=True)


# =============================================================================
# Builders
# =============================================================================


@pytest.fixture
def settings() -> ModkitSettings:
    return ModkitSettings(_env_file=None)


@pytest.fixture
def module_tree(tmp_path) -> ModuleTree:
    """A ``com.example.app`` module with one class in ``src/``."""
    tree = ModuleTree(tmp_path)
    tree.declare("com.example.app")
    tree.source("com/example/app/Main.java", "package com.example.app;\npublic class Main {}\n")
    tree.backdate()
    return tree


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()
