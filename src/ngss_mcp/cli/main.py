"""NGSS standards CLI - ngss command."""

from pathlib import Path

import click

from ngss_mcp.cli.query import lookup_command, match_command, search_command, stats_command, suggest_command
from ngss_mcp.cli.serve import serve_command
from ngss_mcp.config.loader import load_config
from ngss_mcp.core.errors import ConfigError
from ngss_mcp.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="ngss")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """NGSS standards lookup, search, and MCP server."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(lookup_command, name="lookup")
cli.add_command(search_command, name="search")
cli.add_command(match_command, name="match")
cli.add_command(suggest_command, name="suggest")
cli.add_command(stats_command, name="stats")


if __name__ == "__main__":
    cli()
