"""Tests for the Notion server tools and reshaping helpers."""

import inspect
import json

import pytest

from adapter_core import notion

PAGE = {
    "object": "page",
    "id": "page-1",
    "url": "https://www.notion.so/Roadmap-page1",
    "archived": False,
    "last_edited_time": "2025-01-05T10:00:00.000Z",
    "properties": {
        "Status": {"type": "select", "select": {"name": "Active"}},
        "Name": {"type": "title", "title": [{"plain_text": "Road"}, {"plain_text": "map"}]},
    },
}

DATABASE = {
    "object": "database",
    "id": "db-1",
    "url": "https://www.notion.so/db1",
    "title": [{"plain_text": "Tasks"}],
    "properties": {"Name": {"type": "title"}, "Due": {"type": "date"}},
}


class TestReshaping:
    def test_page_title_from_title_property(self):
        assert notion.summarize_page(PAGE)["title"] == "Roadmap"

    def test_database_title_and_property_types(self):
        summary = notion.summarize_database(DATABASE)
        assert summary["title"] == "Tasks"
        assert summary["properties"] == {"Name": "title", "Due": "date"}

    def test_block_text_is_flattened(self):
        block = {
            "id": "b1",
            "type": "heading_2",
            "has_children": False,
            "heading_2": {"rich_text": [{"plain_text": "Goals "}, {"plain_text": "2025"}]},
        }
        assert notion.summarize_block(block) == {
            "id": "b1",
            "type": "heading_2",
            "text": "Goals 2025",
            "has_children": False,
        }

    def test_block_without_rich_text(self):
        block = {"id": "b2", "type": "divider", "divider": {}, "has_children": False}
        assert notion.summarize_block(block)["text"] == ""


class TestTools:
    @pytest.mark.asyncio
    async def test_headers(self, stub, notion_registry):
        stub.add("GET", "/v1/pages/page-1", PAGE)
        await notion_registry.invoke("notion_get_page", {"page_id": "page-1"})

        headers = stub.requests[0].headers
        assert headers["Authorization"] == "Bearer test-token"
        assert headers["Notion-Version"] == "2022-06-28"

    @pytest.mark.asyncio
    async def test_search_with_filter(self, stub, notion_registry):
        stub.add("POST", "/v1/search", {"results": [PAGE, DATABASE], "has_more": True, "next_cursor": "cur-2"})

        result = await notion_registry.invoke("notion_search", {"query": "road", "filter_type": "page"})

        assert stub.body() == {
            "query": "road",
            "page_size": 10,
            "filter": {"property": "object", "value": "page"},
        }
        data = json.loads(result.text)
        assert [item["title"] for item in data["results"]] == ["Roadmap", "Tasks"]
        assert data["next_cursor"] == "cur-2"

    @pytest.mark.asyncio
    async def test_create_page_under_page_with_content(self, stub, notion_registry):
        stub.add("POST", "/v1/pages", PAGE)

        await notion_registry.invoke(
            "notion_create_page",
            {"parent_id": "parent-1", "title": "Roadmap", "content": "First paragraph.\n\nSecond one."},
        )

        body = stub.body()
        assert body["parent"] == {"page_id": "parent-1"}
        assert body["properties"]["title"]["title"][0]["text"]["content"] == "Roadmap"
        assert [child["paragraph"]["rich_text"][0]["text"]["content"] for child in body["children"]] == [
            "First paragraph.",
            "Second one.",
        ]

    @pytest.mark.asyncio
    async def test_create_page_in_database(self, stub, notion_registry):
        stub.add("POST", "/v1/pages", PAGE)

        await notion_registry.invoke(
            "notion_create_page", {"parent_id": "db-1", "parent_type": "database", "title": "Task"}
        )

        body = stub.body()
        assert body["parent"] == {"database_id": "db-1"}
        assert "Name" in body["properties"]
        assert "children" not in body

    @pytest.mark.asyncio
    async def test_update_page_passes_properties_through(self, stub, notion_registry):
        stub.add("PATCH", "/v1/pages/page-1", PAGE)
        properties = {"Status": {"select": {"name": "Done"}}}

        await notion_registry.invoke("notion_update_page", {"page_id": "page-1", "properties": properties})

        assert stub.body() == {"properties": properties}

    @pytest.mark.asyncio
    async def test_archive_page(self, stub, notion_registry):
        stub.add("PATCH", "/v1/pages/page-1", dict(PAGE, archived=True))

        result = await notion_registry.invoke("notion_archive_page", {"page_id": "page-1"})

        assert stub.body() == {"archived": True}
        assert json.loads(result.text)["archived"] is True

    @pytest.mark.asyncio
    async def test_query_database_filter(self, stub, notion_registry):
        stub.add("POST", "/v1/databases/db-1/query", {"results": [PAGE], "has_more": False, "next_cursor": None})
        filter_ = {"property": "Status", "select": {"equals": "Active"}}

        result = await notion_registry.invoke("notion_query_database", {"database_id": "db-1", "filter": filter_})

        assert stub.body() == {"filter": filter_, "page_size": 10}
        assert json.loads(result.text)["results"][0]["id"] == "page-1"

    @pytest.mark.asyncio
    async def test_block_children_pagination(self, stub, notion_registry):
        stub.add("GET", "/v1/blocks/page-1/children", {"results": [], "has_more": False, "next_cursor": None})

        await notion_registry.invoke("notion_get_block_children", {"block_id": "page-1", "start_cursor": "c1"})

        params = stub.requests[0].url.params
        assert params["page_size"] == "50"
        assert params["start_cursor"] == "c1"

    @pytest.mark.asyncio
    async def test_append_text(self, stub, notion_registry):
        stub.add("PATCH", "/v1/blocks/page-1/children", {"results": [], "has_more": False})

        await notion_registry.invoke("notion_append_text", {"block_id": "page-1", "paragraphs": ["One", "Two"]})

        children = stub.body()["children"]
        assert [c["type"] for c in children] == ["paragraph", "paragraph"]

    @pytest.mark.asyncio
    async def test_comments(self, stub, notion_registry):
        stub.add(
            "GET",
            "/v1/comments",
            {
                "results": [
                    {"id": "c1", "rich_text": [{"plain_text": "Looks good"}], "created_by": {"id": "u1"}}
                ],
                "has_more": False,
            },
        )

        result = await notion_registry.invoke("notion_list_comments", {"block_id": "page-1"})

        assert stub.requests[0].url.params["block_id"] == "page-1"
        assert json.loads(result.text)["results"][0]["text"] == "Looks good"

    @pytest.mark.asyncio
    async def test_unauthorized(self, stub, notion_registry):
        stub.add("GET", "/v1/pages/page-1", {"object": "error", "message": "API token is invalid."}, status=401)

        result = await notion_registry.invoke("notion_get_page", {"page_id": "page-1"})

        assert result.text == "Error: Notion API error: 401 API token is invalid."


class TestSignatures:
    @pytest.mark.parametrize(
        "fn",
        [fn for name, fn in inspect.getmembers(notion, inspect.iscoroutinefunction) if fn.__module__ == notion.__name__],
        ids=lambda fn: fn.__name__,
    )
    def test_operations_are_fully_annotated(self, fn):
        signature = inspect.signature(fn)
        assert all(p.annotation is not inspect.Parameter.empty for p in signature.parameters.values())
        assert signature.return_annotation is not inspect.Signature.empty
