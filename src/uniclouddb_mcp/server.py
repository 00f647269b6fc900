"""FastMCP server exposing the database tools.

Registers the ``query``, ``add``, ``update`` and ``remove`` tools and the
``help`` prompt. Tool output is the envelope text; error envelopes are raised
as ``ToolError`` so clients receive ``isError: true`` with the message as-is.
"""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from uniclouddb_mcp.models import OrderBy, ResponseEnvelope
from uniclouddb_mcp.tools import ToolAdapter, get_tool_spec, render_catalog

SERVER_NAME = "UniCloudDB-MCP"
SERVER_INSTRUCTIONS = (
    "JQL-based uniCloud database tools supporting query, add, update and remove."
)


def _unwrap(envelope: ResponseEnvelope) -> str:
    if envelope.is_error:
        raise ToolError(envelope.first_text)
    return envelope.first_text


def _describe(tool_name: str) -> str:
    spec = get_tool_spec(tool_name)
    lines = [f"{spec.summary} (JQL).", "", "Args:"]
    for param in spec.params:
        suffix = "" if param.required else " (optional)"
        lines.append(f"    {param.name}: {param.description}{suffix}")
    return "\n".join(lines)


def create_server(adapter: ToolAdapter) -> FastMCP:
    """Build the MCP server bound to ``adapter``."""
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    @mcp.tool(name="query", description=_describe("query"))
    async def query(
        collection: str,
        where: dict[str, Any] | None = None,
        field: dict[str, Any] | None = None,
        orderBy: OrderBy | None = None,  # noqa: N803
        limit: int | None = None,
        skip: int | None = None,
    ) -> str:
        envelope = await adapter.handle_query(
            {
                "collection": collection,
                "where": where,
                "field": field,
                "orderBy": orderBy.model_dump() if orderBy else None,
                "limit": limit,
                "skip": skip,
            }
        )
        return _unwrap(envelope)

    @mcp.tool(name="add", description=_describe("add"))
    async def add(collection: str, data: dict[str, Any] | list[Any]) -> str:
        envelope = await adapter.handle_add({"collection": collection, "data": data})
        return _unwrap(envelope)

    @mcp.tool(name="update", description=_describe("update"))
    async def update(
        collection: str, where: dict[str, Any], data: dict[str, Any]
    ) -> str:
        envelope = await adapter.handle_update(
            {"collection": collection, "where": where, "data": data}
        )
        return _unwrap(envelope)

    @mcp.tool(name="remove", description=_describe("remove"))
    async def remove(collection: str, where: dict[str, Any]) -> str:
        envelope = await adapter.handle_remove({"collection": collection, "where": where})
        return _unwrap(envelope)

    @mcp.prompt(name="help", description="How to use the UniCloudDB-MCP tools")
    def help_prompt() -> str:
        return render_catalog()

    return mcp
