# =============================================================================
# adapter_tools/notion_tools.py  —  Notion Server Tool Declarations
# =============================================================================
#
# Notion IDs are UUIDs, with or without dashes; they are passed through
# untouched.  Pagination is cursor based: a listing returns `next_cursor`,
# which the caller sends back as `start_cursor`.
# =============================================================================

from adapter_core import notion
from adapter_core import schema as s
from adapter_core.registry import ToolRegistry
from adapter_core.upstream import UpstreamClient

START_CURSOR = s.Optional(s.String("Cursor returned as next_cursor by the previous call"))


def _page_size(default: int) -> s.Optional:
    return s.Optional(s.Number("Number of results per page (max 100)", integer=True), default=default)


def register_notion_tools(registry: ToolRegistry, client: UpstreamClient) -> ToolRegistry:
    # --- Search --------------------------------------------------------------
    @registry.tool(
        "notion_search",
        "Search pages and databases shared with the integration by title",
        s.Object(
            {
                "query": s.String("Text to search for"),
                "filter_type": s.Optional(s.Enum(("page", "database"), "Only return this kind of object")),
                "page_size": _page_size(10),
                "start_cursor": START_CURSOR,
            }
        ),
    )
    async def notion_search(query, filter_type, page_size, start_cursor):
        return await notion.search(client, query, filter_type, page_size, start_cursor)

    # --- Pages ---------------------------------------------------------------
    @registry.tool(
        "notion_get_page",
        "Get a page's title, URL and property types",
        s.Object({"page_id": s.String("ID of the page")}),
    )
    async def notion_get_page(page_id):
        return await notion.get_page(client, page_id)

    @registry.tool(
        "notion_create_page",
        "Create a page under a parent page or as a row of a database, with optional text content. "
        "Paragraphs in the content are separated by blank lines.",
        s.Object(
            {
                "parent_id": s.String("ID of the parent page or database"),
                "parent_type": s.Optional(s.Enum(notion.PARENT_TYPES, "Kind of parent"), default="page"),
                "title": s.String("Title of the new page"),
                "content": s.Optional(s.String("Plain text body")),
            }
        ),
    )
    async def notion_create_page(parent_id, parent_type, title, content):
        return await notion.create_page(client, parent_id, title, parent_type, content)

    @registry.tool(
        "notion_update_page",
        "Update page properties. Values use the Notion property value format.",
        s.Object(
            {
                "page_id": s.String("ID of the page"),
                "properties": s.Object(description="Property name → Notion property value", open=True),
            }
        ),
    )
    async def notion_update_page(page_id, properties):
        return await notion.update_page(client, page_id, properties)

    @registry.tool(
        "notion_archive_page",
        "Archive (move to trash) a page",
        s.Object({"page_id": s.String("ID of the page")}),
    )
    async def notion_archive_page(page_id):
        return await notion.archive_page(client, page_id)

    # --- Databases -----------------------------------------------------------
    @registry.tool(
        "notion_get_database",
        "Get a database's title, URL and property schema",
        s.Object({"database_id": s.String("ID of the database")}),
    )
    async def notion_get_database(database_id):
        return await notion.get_database(client, database_id)

    @registry.tool(
        "notion_query_database",
        "Query the rows of a database, optionally filtered and sorted with Notion filter/sort objects",
        s.Object(
            {
                "database_id": s.String("ID of the database"),
                "filter": s.Optional(s.Object(description="Notion filter object", open=True)),
                "sorts": s.Optional(s.Array(s.Object(open=True), "Notion sort objects")),
                "page_size": _page_size(10),
                "start_cursor": START_CURSOR,
            }
        ),
    )
    async def notion_query_database(database_id, filter, sorts, page_size, start_cursor):
        return await notion.query_database(client, database_id, filter, sorts, page_size, start_cursor)

    # --- Blocks --------------------------------------------------------------
    @registry.tool(
        "notion_get_block_children",
        "List the content blocks of a page or block as plain text",
        s.Object(
            {
                "block_id": s.String("ID of the page or block"),
                "page_size": _page_size(50),
                "start_cursor": START_CURSOR,
            }
        ),
    )
    async def notion_get_block_children(block_id, page_size, start_cursor):
        return await notion.get_block_children(client, block_id, page_size, start_cursor)

    @registry.tool(
        "notion_append_text",
        "Append paragraphs of plain text to the end of a page or block",
        s.Object(
            {
                "block_id": s.String("ID of the page or block"),
                "paragraphs": s.Array(s.String(), "Paragraphs to append, in order"),
            }
        ),
    )
    async def notion_append_text(block_id, paragraphs):
        return await notion.append_text(client, block_id, paragraphs)

    @registry.tool(
        "notion_delete_block",
        "Delete (archive) a block",
        s.Object({"block_id": s.String("ID of the block")}),
    )
    async def notion_delete_block(block_id):
        return await notion.delete_block(client, block_id)

    # --- Comments ------------------------------------------------------------
    @registry.tool(
        "notion_add_comment",
        "Add a comment to a page",
        s.Object({"page_id": s.String("ID of the page"), "text": s.String("Comment text")}),
    )
    async def notion_add_comment(page_id, text):
        return await notion.add_comment(client, page_id, text)

    @registry.tool(
        "notion_list_comments",
        "List unresolved comments on a page or block",
        s.Object({"block_id": s.String("ID of the page or block")}),
    )
    async def notion_list_comments(block_id):
        return await notion.list_comments(client, block_id)

    return registry
