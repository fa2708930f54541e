"""Shared fixtures: a recording stand-in for the third-party APIs."""

import json

import httpx
import pytest

from adapter_core.config import AdapterConfig
from adapter_tools.mcp_server import build_registry


class StubAPI:
    """Answers requests from a fixed route table and records every request.

    Routes are keyed by (method, URL path).  Unrouted requests get a 404 with
    a GitHub-style ``{"message": "Not Found"}`` body.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, json_body=None, status: int = 200, text: str | None = None) -> "StubAPI":
        if text is not None:
            self.routes[(method, path)] = httpx.Response(status, text=text)
        else:
            self.routes[(method, path)] = httpx.Response(status, json=json_body)
        return self

    def fail(self, method: str, path: str, error: Exception) -> "StubAPI":
        self.routes[(method, path)] = error
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, Exception):
            raise route
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def body(self, index: int = -1):
        return json.loads(self.requests[index].content)


@pytest.fixture()
def stub():
    return StubAPI()


def make_registry(server: str, stub: StubAPI, credential: str | None = "test-token"):
    config = AdapterConfig(server=server, credential=None if server == "weather" else credential)
    registry, _client = build_registry(config, transport=stub.transport)
    return registry


@pytest.fixture()
def weather_registry(stub):
    return make_registry("weather", stub)


@pytest.fixture()
def maps_registry(stub):
    return make_registry("maps", stub)


@pytest.fixture()
def github_registry(stub):
    return make_registry("github", stub)


@pytest.fixture()
def notion_registry(stub):
    return make_registry("notion", stub)
