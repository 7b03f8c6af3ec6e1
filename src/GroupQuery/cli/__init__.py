"""CLI package for GroupQuery command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from GroupQuery.cli.runner import CommandRunner
from GroupQuery.cli.ui import cli


def main() -> None:
    """Run GroupQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
