"""ngss serve command - run the MCP server."""

import click

from ngss_mcp.config.models import NgssConfig
from ngss_mcp.core.errors import NgssError


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Override the configured transport",
)
@click.option("--host", default=None, help="Bind address for http transport")
@click.option("--port", type=click.IntRange(0, 65535), default=None, help="Port for http transport")
@click.pass_context
def serve_command(
    ctx: click.Context, transport: str | None, host: str | None, port: int | None
) -> None:
    """Start the MCP server.

    stdio is the default transport; stdout carries protocol messages, so all
    logging goes to stderr.
    """
    from ngss_mcp.mcp.server import run_server

    config: NgssConfig = ctx.obj["config"]
    overrides = {
        k: v for k, v in (("transport", transport), ("host", host), ("port", port)) if v is not None
    }
    if overrides:
        server = config.server.model_validate({**config.server.model_dump(), **overrides})
        config = config.model_copy(update={"server": server})

    try:
        run_server(config)
    except NgssError as e:
        raise click.ClickException(str(e)) from e
