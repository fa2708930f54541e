# =============================================================================
# adapter_tools/mcp_server.py  —  FastMCP Facade for the Adapter Servers
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds one of the four adapter servers (weather, maps, github, notion)
#   and exposes its tools over MCP with FastMCP.
#
# HOW IT WORKS (the flow):
#   1. main.py loads the AdapterConfig for the chosen server
#   2. build_registry() creates the server's UpstreamClient, registers every
#      tool declaration against a fresh ToolRegistry, and freezes it
#   3. build_mcp_server() wraps each registered tool in a RegistryTool and
#      adds it to a FastMCP instance
#   4. A client calls a tool → RegistryTool.run() → registry.invoke()
#      → validation, handler, result shaping (adapter_core.envelope)
#      Names the registry does not hold go through UnknownToolMiddleware to
#      the same registry.invoke().
#   5. On shutdown the server lifespan closes the UpstreamClient.
#
#   The registry owns the behaviour; FastMCP only carries it.  Anything that
#   can go wrong in a call comes back as a normal "Error: ..." text result.
#
# RUNNING A SERVER:
#     python main.py weather                    (stdio, for MCP clients)
#     python main.py github --transport http    (streamable HTTP)
# =============================================================================

import json
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

import httpx
from fastmcp import FastMCP
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from mcp.types import TextContent
from pydantic import Field

from adapter_core import github, maps, notion, weather
from adapter_core.config import AdapterConfig
from adapter_core.models import InvocationResult, ToolDefinition
from adapter_core.registry import ToolRegistry
from adapter_core.schema import to_json_schema
from adapter_core.upstream import UpstreamClient
from adapter_tools.github_tools import register_github_tools
from adapter_tools.maps_tools import register_maps_tools
from adapter_tools.notion_tools import register_notion_tools
from adapter_tools.weather_tools import register_weather_tools

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the stdio transport uses STDOUT for MCP JSON
# messages; a log line on stdout would corrupt the protocol stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - YELLOW for intermediate status messages
#     - GREEN for responses
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("adapter_tools.mcp")


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO; keep that for debug runs only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def _log_request(tool_name: str, params: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: InvocationResult) -> InvocationResult:
    """Log the tool response as compact JSON in GREEN, then return it."""
    blocks = [{"type": block.type, "text": block.text} for block in result.content]
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(blocks, separators=(',', ':'))}{_RESET}")
    return result


# =============================================================================
# Server table
# =============================================================================
@dataclass(frozen=True)
class ServerSpec:
    title: str
    create_client: Callable[..., UpstreamClient]
    register_tools: Callable[[ToolRegistry, UpstreamClient], ToolRegistry]


SERVERS: dict[str, ServerSpec] = {
    "weather": ServerSpec("national-weather-service", weather.create_client, register_weather_tools),
    "maps": ServerSpec("google-maps", maps.create_client, register_maps_tools),
    "github": ServerSpec("github", github.create_client, register_github_tools),
    "notion": ServerSpec("notion", notion.create_client, register_notion_tools),
}


def build_registry(
    config: AdapterConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[ToolRegistry, UpstreamClient]:
    """Create the server's upstream client and its fully populated, frozen registry.

    ``transport`` replaces the network (tests pass an httpx.MockTransport).
    """
    entry = SERVERS[config.server]
    client = entry.create_client(config, transport=transport)
    registry = entry.register_tools(ToolRegistry(config.server), client)
    registry.freeze()
    _log_status(f"{entry.title}: {len(registry)} tools registered")
    return registry, client


# =============================================================================
# FastMCP bridge
# =============================================================================
def _to_tool_result(result: InvocationResult) -> ToolResult:
    # One MCP text block per InvocationResult block, order kept.
    return ToolResult(content=[TextContent(type="text", text=block.text) for block in result.content])


class RegistryTool(Tool):
    """A FastMCP tool whose calls are answered by a ToolRegistry."""

    registry: Any = Field(exclude=True)

    @classmethod
    def from_definition(cls, registry: ToolRegistry, definition: ToolDefinition) -> "RegistryTool":
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=to_json_schema(definition.input_schema),
            registry=registry,
        )

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        _log_request(self.name, arguments)
        result = _log_response(self.name, await self.registry.invoke(self.name, arguments))
        return _to_tool_result(result)


class UnknownToolMiddleware(Middleware):
    """Sends calls for names the registry does not hold to registry.invoke().

    FastMCP would otherwise answer them with its own error result; this keeps
    the "Error: Unknown tool: <name>" text every other failure uses.
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def on_call_tool(self, context: MiddlewareContext, call_next: CallNext) -> ToolResult:
        name = context.message.name
        if name in self.registry:
            return await call_next(context)
        arguments = context.message.arguments or {}
        _log_request(name, arguments)
        return _to_tool_result(_log_response(name, await self.registry.invoke(name, arguments)))


def _closing(client: UpstreamClient):
    """Lifespan that closes the server's UpstreamClient on shutdown."""

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        try:
            yield {}
        finally:
            await client.aclose()
            _log_status(f"{server.name}: upstream client closed")

    return lifespan


def build_mcp_server(
    registry: ToolRegistry,
    title: str | None = None,
    client: UpstreamClient | None = None,
) -> FastMCP:
    mcp = FastMCP(
        title or registry.name,
        middleware=[UnknownToolMiddleware(registry)],
        lifespan=_closing(client) if client is not None else None,
    )
    for spec in registry.list():
        mcp.add_tool(RegistryTool.from_definition(registry, registry.get(spec.name)))
    return mcp


def create_server(config: AdapterConfig, transport: httpx.AsyncBaseTransport | None = None) -> FastMCP:
    registry, client = build_registry(config, transport)
    return build_mcp_server(registry, SERVERS[config.server].title, client)
