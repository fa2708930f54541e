# =============================================================================
# adapter_tools/__init__.py
# =============================================================================
# Tool declarations for each adapter server, and the FastMCP facade.
#
#   *_tools.py     → register_<server>_tools(registry, client): names,
#                    descriptions and input schemas, each forwarding to an
#                    adapter_core function
#   mcp_server.py  → builds a server's registry and serves it over MCP
#
# The descriptions here are what a calling model reads to decide WHEN to
# use a tool, so they describe results rather than implementation.
# =============================================================================
