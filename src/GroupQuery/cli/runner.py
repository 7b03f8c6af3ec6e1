"""Command runner for coordinating CLI execution.

Configures logging, creates the query service, and turns unexpected errors
into ``click.Abort`` at the CLI boundary.
"""

from __future__ import annotations

import click

from GroupQuery.cli.commands import OperatorsCommand, ParseCommand
from GroupQuery.config import AppConfig
from GroupQuery.services import create_query_service
from GroupQuery.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with logging and error handling."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )

    def run_parse(self, query: str, *, output_format: str, action: str) -> bool:
        """Compile and print one query.

        Args:
            query: Raw query string.
            output_format: One of ``text`` or ``json``.
            action: The CLI command name (e.g., 'parse').

        Returns:
            True if the query compiled, False if it was rejected.

        Raises:
            click.Abort: On unexpected errors.
        """
        self._configure_logging(action)
        try:
            command = ParseCommand(service=create_query_service(self.config), output_format=output_format)
            return command.execute(query)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Parse failed: %s", e)
            raise click.Abort from e

    def run_operators(self, *, action: str) -> None:
        """Print the operator table for the configured index schema.

        Raises:
            click.Abort: On unexpected errors.
        """
        self._configure_logging(action)
        try:
            OperatorsCommand(service=create_query_service(self.config)).execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Listing operators failed: %s", e)
            raise click.Abort from e
