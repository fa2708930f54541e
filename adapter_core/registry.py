# =============================================================================
# adapter_core/registry.py  —  Tool Registry
# =============================================================================
#
# One registry per adapter server.  It is built once at startup by the
# server's construction routine, frozen, and then only read.  There is no
# module-level registry: two servers in one process never share tools.
#
#   registry = ToolRegistry("weather")
#
#   @registry.tool("get_weather_forecast", "Multi-day forecast", schema)
#   async def get_weather_forecast(location, days): ...
#
#   registry.freeze()
#   await registry.invoke("get_weather_forecast", {"location": "40.7,-74.0"})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping

from adapter_core.envelope import invoke_tool
from adapter_core.errors import DuplicateToolError, RegistryFrozenError, UnknownToolError
from adapter_core.models import InvocationResult, ToolDefinition, ToolSpec
from adapter_core.schema import Object

logger = logging.getLogger(__name__)


class ToolListing:
    """Restartable view over a registry's tools, in registration order.

    Every ``iter()`` starts from the beginning; handlers are never exposed.
    """

    def __init__(self, tools: Mapping[str, ToolDefinition]):
        self._tools = tools

    def __iter__(self) -> Iterator[ToolSpec]:
        for definition in self._tools.values():
            yield definition.spec

    def __len__(self) -> int:
        return len(self._tools)


class ToolRegistry:
    def __init__(self, name: str = "tools"):
        self.name = name
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------
    def register(
        self,
        name: str,
        description: str,
        input_schema: Object,
        handler: Callable[..., Any],
    ) -> ToolDefinition:
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._tools:
            raise DuplicateToolError(name)
        if not isinstance(input_schema, Object):
            raise TypeError(f"Tool '{name}' input schema must be an Object, got {type(input_schema).__name__}")

        definition = ToolDefinition(name, description, input_schema, handler)
        self._tools[name] = definition
        logger.debug("[%s] registered tool %s", self.name, name)
        return definition

    def tool(self, name: str, description: str, input_schema: Object):
        """Decorator form of :meth:`register`; returns the function unchanged."""

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name, description, input_schema, fn)
            return fn

        return decorator

    def freeze(self) -> ToolRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------
    def list(self) -> ToolListing:
        return ToolListing(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    # -------------------------------------------------------------------------
    # Invocation
    # -------------------------------------------------------------------------
    async def invoke(self, name: str, raw_input: Mapping[str, Any] | None = None) -> InvocationResult:
        """Call a tool by name.  Never raises for per-call failures."""
        try:
            definition = self.get(name)
        except UnknownToolError as e:
            logger.warning("[%s] %s", self.name, e.message)
            return InvocationResult.failure(e.message)
        return await invoke_tool(definition, raw_input)
