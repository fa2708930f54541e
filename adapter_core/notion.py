# =============================================================================
# adapter_core/notion.py  —  Notion API Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Search, pages, databases, blocks and comments in a Notion workspace,
#   through the public REST API (api.notion.com/v1) with an integration token.
#
# RESHAPING:
#   Notion objects are deeply nested: a page title is hidden inside
#   properties → <title prop> → title → [rich text] → plain_text.  Results
#   are flattened before they leave this module:
#
#       page / database → {"id", "title", "url", "last_edited_time", ...}
#       block           → {"id", "type", "text", "has_children"}
#       comment         → {"id", "text", "created_time", "created_by"}
# =============================================================================

from typing import Any, Callable

import httpx

from adapter_core.config import AdapterConfig
from adapter_core.upstream import UpstreamClient

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

PARENT_TYPES = ("page", "database")


def create_client(config: AdapterConfig, transport: httpx.AsyncBaseTransport | None = None) -> UpstreamClient:
    return UpstreamClient(
        NOTION_API_BASE,
        label="Notion API",
        headers={
            "Authorization": f"Bearer {config.credential}",
            "Notion-Version": NOTION_VERSION,
        },
        timeout=config.timeout,
        transport=transport,
    )


# =============================================================================
# Flattening helpers
# =============================================================================
def plain_text(rich_text: list[dict[str, Any]] | None) -> str:
    return "".join(part.get("plain_text", "") for part in rich_text or [])


def _title(obj: dict[str, Any]) -> str:
    # Databases carry the title at the top level.
    if isinstance(obj.get("title"), list):
        return plain_text(obj["title"])
    for prop in (obj.get("properties") or {}).values():
        if prop.get("type") == "title":
            return plain_text(prop.get("title"))
    return ""


def summarize_page(page: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": page.get("id"),
        "object": page.get("object", "page"),
        "title": _title(page),
        "url": page.get("url"),
        "archived": page.get("archived", False),
        "last_edited_time": page.get("last_edited_time"),
    }


def summarize_database(database: dict[str, Any]) -> dict[str, Any]:
    summary = summarize_page(database)
    summary["properties"] = {
        name: prop.get("type") for name, prop in (database.get("properties") or {}).items()
    }
    return summary


def summarize_block(block: dict[str, Any]) -> dict[str, Any]:
    block_type = block.get("type", "unsupported")
    body = block.get(block_type) or {}
    return {
        "id": block.get("id"),
        "type": block_type,
        "text": plain_text(body.get("rich_text")) if isinstance(body, dict) else "",
        "has_children": block.get("has_children", False),
    }


def summarize_comment(comment: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": comment.get("id"),
        "text": plain_text(comment.get("rich_text")),
        "created_time": comment.get("created_time"),
        "created_by": (comment.get("created_by") or {}).get("id"),
    }


def _listing(data: dict[str, Any], summarize: Callable[[dict[str, Any]], dict[str, Any]]) -> dict[str, Any]:
    return {
        "results": [summarize(item) for item in data.get("results", [])],
        "has_more": data.get("has_more", False),
        "next_cursor": data.get("next_cursor"),
    }


def _rich_text(text: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": text}}]


def _paragraph(text: str) -> dict[str, Any]:
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": _rich_text(text)}}


# =============================================================================
# Search
# =============================================================================
async def search(
    client: UpstreamClient,
    query: str,
    filter_type: str | None = None,
    page_size: int = 10,
    start_cursor: str | None = None,
) -> dict:
    body: dict[str, Any] = {"query": query, "page_size": page_size, "start_cursor": start_cursor}
    if filter_type:
        body["filter"] = {"property": "object", "value": filter_type}
    data = await client.post("/search", json=body)
    return _listing(data, _summarize_any)


def _summarize_any(obj: dict[str, Any]) -> dict[str, Any]:
    if obj.get("object") == "database":
        return summarize_database(obj)
    return summarize_page(obj)


# =============================================================================
# Pages
# =============================================================================
async def get_page(client: UpstreamClient, page_id: str) -> dict:
    page = await client.get(f"/pages/{page_id}")
    summary = summarize_page(page)
    summary["properties"] = {name: prop.get("type") for name, prop in (page.get("properties") or {}).items()}
    return summary


async def create_page(
    client: UpstreamClient,
    parent_id: str,
    title: str,
    parent_type: str = "page",
    content: str | None = None,
) -> dict:
    if parent_type == "database":
        parent = {"database_id": parent_id}
        # Database pages are titled through the database's title column,
        # which Notion exposes under the default name "Name".
        properties = {"Name": {"title": _rich_text(title)}}
    else:
        parent = {"page_id": parent_id}
        properties = {"title": {"title": _rich_text(title)}}

    body: dict[str, Any] = {"parent": parent, "properties": properties}
    if content:
        body["children"] = [_paragraph(paragraph) for paragraph in content.split("\n\n") if paragraph.strip()]
    return summarize_page(await client.post("/pages", json=body))


async def update_page(client: UpstreamClient, page_id: str, properties: dict[str, Any]) -> dict:
    return summarize_page(await client.patch(f"/pages/{page_id}", json={"properties": properties}))


async def archive_page(client: UpstreamClient, page_id: str) -> dict:
    return summarize_page(await client.patch(f"/pages/{page_id}", json={"archived": True}))


# =============================================================================
# Databases
# =============================================================================
async def get_database(client: UpstreamClient, database_id: str) -> dict:
    return summarize_database(await client.get(f"/databases/{database_id}"))


async def query_database(
    client: UpstreamClient,
    database_id: str,
    filter: dict[str, Any] | None = None,
    sorts: list[dict[str, Any]] | None = None,
    page_size: int = 10,
    start_cursor: str | None = None,
) -> dict:
    body = {"filter": filter, "sorts": sorts, "page_size": page_size, "start_cursor": start_cursor}
    data = await client.post(f"/databases/{database_id}/query", json=body)
    return _listing(data, summarize_page)


# =============================================================================
# Blocks
# =============================================================================
async def get_block_children(
    client: UpstreamClient, block_id: str, page_size: int = 50, start_cursor: str | None = None
) -> dict:
    data = await client.get(
        f"/blocks/{block_id}/children",
        params={"page_size": page_size, "start_cursor": start_cursor},
    )
    return _listing(data, summarize_block)


async def append_text(client: UpstreamClient, block_id: str, paragraphs: list[str]) -> dict:
    data = await client.patch(
        f"/blocks/{block_id}/children",
        json={"children": [_paragraph(text) for text in paragraphs]},
    )
    return _listing(data, summarize_block)


async def delete_block(client: UpstreamClient, block_id: str) -> dict:
    block = await client.delete(f"/blocks/{block_id}")
    summary = summarize_block(block)
    summary["archived"] = block.get("archived", True)
    return summary


# =============================================================================
# Comments
# =============================================================================
async def add_comment(client: UpstreamClient, page_id: str, text: str) -> dict:
    data = await client.post("/comments", json={"parent": {"page_id": page_id}, "rich_text": _rich_text(text)})
    return summarize_comment(data)


async def list_comments(client: UpstreamClient, block_id: str) -> dict:
    data = await client.get("/comments", params={"block_id": block_id})
    return _listing(data, summarize_comment)
