"""Command implementations for the GroupQuery CLI.

Business logic for each command, separated from click parameter handling.
"""

from __future__ import annotations

from dataclasses import dataclass

import click

from GroupQuery.core.errors import QueryFailure
from GroupQuery.query.builder import FIELD_OWNER
from GroupQuery.renderers import render
from GroupQuery.services.query import GroupQueryService


@dataclass(slots=True)
class ParseCommand:
    """Compile one query and print it in the requested format."""

    service: GroupQueryService
    output_format: str

    def execute(self, query: str) -> bool:
        result = self.service.compile(query)
        click.echo(render(result, output_format=self.output_format, query=query))
        return not isinstance(result, QueryFailure)


@dataclass(slots=True)
class OperatorsCommand:
    """Print every operator keyword with its availability on the active index."""

    service: GroupQueryService

    def execute(self) -> None:
        schema = self.service.builder.args.schema
        click.echo(f"Group index schema version: {schema.version}")
        for operator, available in self.service.operator_support().items():
            click.echo(f"  {operator:<12} {'yes' if available else 'no (index upgrade required)'}")
        click.echo(f"  {FIELD_OWNER:<12} reserved")
