"""Tests for server assembly and the FastMCP bridge."""

import pytest
from fastmcp import Client, FastMCP

from adapter_core import schema as s
from adapter_core.config import AdapterConfig
from adapter_core.errors import RegistryFrozenError
from adapter_core.models import TextBlock
from adapter_core.registry import ToolRegistry
from adapter_tools.mcp_server import SERVERS, RegistryTool, build_mcp_server, build_registry, create_server

from conftest import make_registry


class TestBuildRegistry:
    @pytest.mark.parametrize(
        "server,count,sample",
        [
            ("weather", 5, "get_weather_alerts"),
            ("maps", 7, "maps_distance_matrix"),
            ("github", 32, "push_files"),
            ("notion", 12, "notion_query_database"),
        ],
    )
    def test_tool_catalogue(self, stub, server, count, sample):
        registry = make_registry(server, stub)
        assert len(registry) == count
        assert sample in registry

    def test_registry_is_frozen(self, stub):
        registry = make_registry("maps", stub)
        with pytest.raises(RegistryFrozenError):
            registry.register("extra", "d", next(iter(registry.list())).input_schema, lambda: None)

    def test_each_server_gets_its_own_registry(self, stub):
        weather = make_registry("weather", stub)
        maps = make_registry("maps", stub)
        assert not set(weather.names()) & set(maps.names())

    def test_every_server_is_buildable(self, stub):
        for server in SERVERS:
            config = AdapterConfig(server=server, credential="token")
            registry, client = build_registry(config, transport=stub.transport)
            assert registry.frozen
            assert client.base_url.startswith("https://")


class TestRegistryTool:
    def test_parameters_are_json_schema(self, stub):
        registry = make_registry("weather", stub)
        tool = RegistryTool.from_definition(registry, registry.get("get_weather_forecast"))

        assert tool.name == "get_weather_forecast"
        assert tool.parameters["required"] == ["location"]
        assert tool.parameters["properties"]["days"]["default"] == 7

    @pytest.mark.asyncio
    async def test_run_delegates_to_registry(self, stub):
        registry = make_registry("maps", stub)
        tool = RegistryTool.from_definition(registry, registry.get("maps_directions"))

        result = await tool.run({"origin": "A", "destination": "B", "mode": "flying"})

        assert len(result.content) == 1
        assert result.content[0].text.startswith("Error: Invalid value for 'mode'")
        assert stub.requests == []

    def test_build_mcp_server(self, stub):
        registry = make_registry("notion", stub)
        assert isinstance(build_mcp_server(registry, "notion"), FastMCP)

    @pytest.mark.asyncio
    async def test_content_blocks_stay_separate(self):
        registry = ToolRegistry("blocks")
        registry.register("two_blocks", "Two blocks", s.Object({}), lambda: [TextBlock("first"), TextBlock("second")])
        tool = RegistryTool.from_definition(registry.freeze(), registry.get("two_blocks"))

        result = await tool.run({})

        assert [block.text for block in result.content] == ["first", "second"]


class TestServedOverMCP:
    @pytest.mark.asyncio
    async def test_unknown_tool_gets_uniform_failure(self, stub):
        mcp = create_server(AdapterConfig(server="maps", credential="token"), transport=stub.transport)

        async with Client(mcp) as client:
            result = await client.call_tool("nonexistent", {})

        assert [block.text for block in result.content] == ["Error: Unknown tool: nonexistent"]
        assert result.is_error is False
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_validation_failure_round_trip(self, stub):
        mcp = create_server(AdapterConfig(server="maps", credential="token"), transport=stub.transport)

        async with Client(mcp) as client:
            result = await client.call_tool("maps_directions", {"origin": "A", "destination": "B", "mode": "flying"})

        assert len(result.content) == 1
        assert result.content[0].text.startswith("Error: Invalid value for 'mode'")

    @pytest.mark.asyncio
    async def test_lifespan_closes_upstream_client(self, stub):
        registry, upstream = build_registry(AdapterConfig(server="weather"), transport=stub.transport)
        mcp = build_mcp_server(registry, "national-weather-service", upstream)

        async with Client(mcp) as client:
            assert {tool.name for tool in await client.list_tools()} == set(registry.names())
            assert not upstream.closed

        assert upstream.closed
