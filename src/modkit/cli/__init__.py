"""modkit command-line interface."""

from modkit.cli.app import app

__all__ = ["app"]
