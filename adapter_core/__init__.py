# =============================================================================
# adapter_core/__init__.py
# =============================================================================
# The tool contract and the four API adapters.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The registry, schema and
#   envelope decide what a tool call means; the adapters (weather, maps,
#   github, notion) talk to one third-party API each through an
#   UpstreamClient.  Everything here can be exercised with an
#   httpx.MockTransport and no MCP client at all.
# =============================================================================

from adapter_core.errors import (
    ConfigError,
    ConnectivityError,
    DuplicateToolError,
    RegistryFrozenError,
    ToolError,
    UnknownToolError,
    UpstreamError,
    ValidationError,
)
from adapter_core.models import Failure, InvocationResult, Success, TextBlock, ToolDefinition, ToolSpec
from adapter_core.registry import ToolRegistry

__all__ = [
    "ConfigError",
    "ConnectivityError",
    "DuplicateToolError",
    "Failure",
    "InvocationResult",
    "RegistryFrozenError",
    "Success",
    "TextBlock",
    "ToolDefinition",
    "ToolError",
    "ToolRegistry",
    "ToolSpec",
    "UnknownToolError",
    "UpstreamError",
    "ValidationError",
]
