"""pytest fixtures for UniCloudDB-MCP."""

from __future__ import annotations

import json
import sys
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from uniclouddb_mcp.executor import OperationExecutor
from uniclouddb_mcp.models import ServiceTarget
from uniclouddb_mcp.tools import ToolAdapter

SERVICE_URL = "https://db.example.test/mcp"


class StubDatabaseService:
    """Records outbound requests and answers with a canned reply."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply: dict[str, Any] | None = {"code": 0, "data": None}
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(200, json=self.reply)

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    @property
    def last_operation(self) -> dict[str, Any]:
        return self.bodies[-1]["operation"]


@pytest.fixture()
def target() -> ServiceTarget:
    return ServiceTarget(url=SERVICE_URL, timeout_ms=2000)


@pytest.fixture()
def stub_service() -> StubDatabaseService:
    return StubDatabaseService()


@pytest.fixture()
async def executor(stub_service: StubDatabaseService) -> AsyncIterator[OperationExecutor]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(stub_service))
    async with OperationExecutor(client) as operation_executor:
        yield operation_executor


@pytest.fixture()
def adapter(executor: OperationExecutor, target: ServiceTarget) -> ToolAdapter:
    return ToolAdapter(executor, target)
