"""MCP server registration tests."""

from __future__ import annotations

import json

import pytest
from fastmcp import Client

from uniclouddb_mcp.server import SERVER_NAME, create_server
from uniclouddb_mcp.tools import JQL_REFERENCE_URL


@pytest.mark.asyncio
async def test_server_lists_tools_and_help_prompt(adapter) -> None:
    server = create_server(adapter)
    assert server.name == SERVER_NAME

    async with Client(server) as client:
        tools = await client.list_tools()
        prompts = await client.list_prompts()

    assert {tool.name for tool in tools} == {"query", "add", "update", "remove"}
    query_tool = next(tool for tool in tools if tool.name == "query")
    assert query_tool.inputSchema["required"] == ["collection"]
    assert "orderBy" in query_tool.inputSchema["properties"]
    remove_tool = next(tool for tool in tools if tool.name == "remove")
    assert set(remove_tool.inputSchema["required"]) == {"collection", "where"}
    assert [prompt.name for prompt in prompts] == ["help"]


@pytest.mark.asyncio
async def test_help_prompt_returns_catalog(adapter) -> None:
    async with Client(create_server(adapter)) as client:
        prompt = await client.get_prompt("help")

    text = prompt.messages[0].content.text
    assert "query" in text
    assert JQL_REFERENCE_URL in text


@pytest.mark.asyncio
async def test_tool_call_success(adapter, stub_service) -> None:
    stub_service.reply = {"code": 0, "data": {"id": "abc"}}

    async with Client(create_server(adapter)) as client:
        result = await client.call_tool_mcp("add", {"collection": "logs", "data": {"msg": "hi"}})

    assert not result.isError
    assert json.loads(result.content[0].text) == {"id": "abc"}


@pytest.mark.asyncio
async def test_query_tool_forwards_order_by(adapter, stub_service) -> None:
    stub_service.reply = {"code": 0, "data": []}

    async with Client(create_server(adapter)) as client:
        await client.call_tool_mcp(
            "query",
            {
                "collection": "users",
                "where": {"age": {"$gt": 18}},
                "orderBy": {"field": "age", "order": "desc"},
                "limit": 10,
            },
        )

    assert stub_service.last_operation == {
        "collection": "users",
        "action": "query",
        "where": {"age": {"$gt": 18}},
        "orderBy": {"field": "age", "order": "desc"},
        "limit": 10,
    }


@pytest.mark.asyncio
async def test_tool_call_failure_sets_is_error(adapter, stub_service) -> None:
    stub_service.reply = {"code": 403, "msg": "permission denied"}

    async with Client(create_server(adapter)) as client:
        result = await client.call_tool_mcp("remove", {"collection": "logs", "where": {}})

    assert result.isError is True
    assert "permission denied" in result.content[0].text
