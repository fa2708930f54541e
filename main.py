# =============================================================================
# main.py  —  Entry Point for the API Tool Adapter Servers
# =============================================================================
#
# HOW TO RUN:
#   python main.py weather
#   python main.py maps --transport http --port 8001
#   python main.py github --debug
#
# WHAT HAPPENS:
#   1. Loads .env and reads the chosen server's configuration
#      (adapter_core/config.py); a missing credential stops here with exit 1
#   2. Builds the server's registry and FastMCP facade
#      (adapter_tools/mcp_server.py)
#   3. Serves MCP over stdio (default) or HTTP/SSE until interrupted
# =============================================================================

import dataclasses
import sys

import click

from adapter_core.config import CREDENTIAL_VARS, load_config
from adapter_core.errors import ConfigError
from adapter_tools.mcp_server import configure_logging, create_server

TRANSPORTS = ("stdio", "http", "sse")


@click.command()
@click.argument("server", type=click.Choice(list(CREDENTIAL_VARS)))
@click.option("--transport", type=click.Choice(TRANSPORTS), default="stdio", show_default=True,
              help="MCP transport to serve on")
@click.option("--port", type=int, default=8000, show_default=True, help="Port for http/sse transports")
@click.option("--debug", is_flag=True, help="Log at DEBUG level (same as ADAPTER_DEBUG=true)")
def main(server: str, transport: str, port: int, debug: bool) -> None:
    """Run one API adapter as an MCP tool server."""
    try:
        config = load_config(server)
    except ConfigError as e:
        click.echo(e.message, err=True)
        sys.exit(1)

    if debug:
        config = dataclasses.replace(config, debug=True)
    configure_logging(config.debug)

    mcp = create_server(config)
    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=transport, port=port)


if __name__ == "__main__":
    main()
