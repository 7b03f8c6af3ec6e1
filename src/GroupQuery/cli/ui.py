"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from dotenv import load_dotenv

from GroupQuery.cli.runner import CommandRunner
from GroupQuery.config import DEFAULT_CONFIG_PATH, load_config_with_defaults
from GroupQuery.renderers import OUTPUT_FORMATS


@click.group(help="GroupQuery: compile group search queries into predicate trees.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env before reading the config, so
    ``directory.path_env`` overrides can come from the .env file. The given
    file is deep-merged over the default config, so it may hold only the
    keys it changes.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()
    try:
        ctx.obj = load_config_with_defaults(config_path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}") from e


@cli.command("parse")
@click.argument("query")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def parse_cmd(ctx: click.Context, query: str, output_format: str) -> None:
    """Compile QUERY and print the predicate tree.

    Exits with status 1 when the query is rejected.
    """
    runner = CommandRunner(ctx.obj)
    ok = runner.run_parse(query, output_format=output_format, action=ctx.command.name)
    if not ok:
        ctx.exit(1)


@cli.command("operators")
@click.pass_context
def operators_cmd(ctx: click.Context) -> None:
    """List query operators and whether the configured index supports them."""
    CommandRunner(ctx.obj).run_operators(action=ctx.command.name)
