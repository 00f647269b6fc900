"""Tool adapter between MCP tool calls and the operation executor.

Each handler extracts the parameters its tool recognizes, builds an
``OperationDescriptor`` with the tool's fixed action, runs it and renders the
outcome as a ``ResponseEnvelope``. Handlers never raise.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from uniclouddb_mcp.executor import OperationExecutor
from uniclouddb_mcp.logging import bind_call_context, clear_logging_context, get_logger
from uniclouddb_mcp.models import (
    DELETE,
    INSERT,
    QUERY,
    UPDATE,
    OperationDescriptor,
    OperationResult,
    ResponseEnvelope,
    ServiceTarget,
)

logger = get_logger(__name__)

JQL_REFERENCE_URL = "https://uniapp.dcloud.net.cn/uniCloud/jql.html"


@dataclass(frozen=True)
class ToolParam:
    """One tool parameter as advertised to clients."""

    name: str
    description: str
    required: bool = True


@dataclass(frozen=True)
class ToolSpec:
    """Name, action and parameters of one database tool."""

    name: str
    action: str
    summary: str
    params: tuple[ToolParam, ...]

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(param.name for param in self.params)


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="query",
        action=QUERY,
        summary="Query database records",
        params=(
            ToolParam("collection", "collection name"),
            ToolParam("where", "query filter (JQL)", required=False),
            ToolParam("field", "fields to return", required=False),
            ToolParam("orderBy", "sort by {field, order: asc|desc}", required=False),
            ToolParam("limit", "maximum records to return", required=False),
            ToolParam("skip", "records to skip", required=False),
        ),
    ),
    ToolSpec(
        name="add",
        action=INSERT,
        summary="Add database records",
        params=(
            ToolParam("collection", "collection name"),
            ToolParam("data", "record(s) to add (object or array)"),
        ),
    ),
    ToolSpec(
        name="update",
        action=UPDATE,
        summary="Update database records",
        params=(
            ToolParam("collection", "collection name"),
            ToolParam("where", "query filter (JQL)"),
            ToolParam("data", "fields to update"),
        ),
    ),
    ToolSpec(
        name="remove",
        action=DELETE,
        summary="Remove database records",
        params=(
            ToolParam("collection", "collection name"),
            ToolParam("where", "query filter (JQL)"),
        ),
    ),
)

_SPECS_BY_NAME = {spec.name: spec for spec in TOOL_SPECS}

# Optional parameters where an empty value means "not given".
_EMPTY_MEANS_ABSENT = frozenset({"field", "orderBy"})


def get_tool_spec(name: str) -> ToolSpec:
    return _SPECS_BY_NAME[name]


def render_catalog() -> str:
    """Return the static help document describing every tool."""
    lines = ["UniCloudDB-MCP provides the following JQL database tools:", ""]
    for index, spec in enumerate(TOOL_SPECS, start=1):
        lines.append(f"{index}. {spec.name} - {spec.summary}")
        params = ", ".join(
            f"{param.name} ({param.description}{'' if param.required else ', optional'})"
            for param in spec.params
        )
        lines.append(f"   Parameters: {params}")
        lines.append("")
    lines.append(
        "All tools use JQL, a MongoDB-like query syntax, for filters and projections."
    )
    lines.append(f"JQL reference: {JQL_REFERENCE_URL}")
    return "\n".join(lines)


def extract_params(spec: ToolSpec, params: Mapping[str, Any]) -> dict[str, Any]:
    """Return the recognized parameters of ``params`` for ``spec``.

    Unknown keys are dropped. ``None`` values, and empty ``field``/``orderBy``
    objects, are treated as absent. Numbers are kept as given, so ``limit=0``
    is sent.
    """
    extracted: dict[str, Any] = {}
    for name in spec.param_names:
        value = params.get(name)
        if value is None:
            continue
        if name in _EMPTY_MEANS_ABSENT and not value:
            continue
        extracted[name] = value
    return extracted


def render_result(result: OperationResult) -> ResponseEnvelope:
    if result.ok:
        return ResponseEnvelope.text(
            json.dumps(result.payload, indent=2, ensure_ascii=False)
        )
    return ResponseEnvelope.text(result.message or "operation failed", is_error=True)


class ToolAdapter:
    """Per-tool handlers delegating to an ``OperationExecutor``."""

    def __init__(self, executor: OperationExecutor, default_target: ServiceTarget) -> None:
        self.executor = executor
        self.default_target = default_target

    async def handle_query(
        self, params: Mapping[str, Any], target: ServiceTarget | None = None
    ) -> ResponseEnvelope:
        return await self._handle("query", params, target)

    async def handle_add(
        self, params: Mapping[str, Any], target: ServiceTarget | None = None
    ) -> ResponseEnvelope:
        return await self._handle("add", params, target)

    async def handle_update(
        self, params: Mapping[str, Any], target: ServiceTarget | None = None
    ) -> ResponseEnvelope:
        return await self._handle("update", params, target)

    async def handle_remove(
        self, params: Mapping[str, Any], target: ServiceTarget | None = None
    ) -> ResponseEnvelope:
        return await self._handle("remove", params, target)

    def catalog(self) -> str:
        return render_catalog()

    async def _handle(
        self,
        tool_name: str,
        params: Mapping[str, Any],
        target: ServiceTarget | None,
    ) -> ResponseEnvelope:
        spec = get_tool_spec(tool_name)
        bind_call_context(str(uuid.uuid4()), tool_name)
        try:
            try:
                descriptor = OperationDescriptor(
                    action=spec.action, **extract_params(spec, params)
                )
            except ValidationError as exc:
                logger.warning("tool_params_invalid", errors=exc.error_count())
                return ResponseEnvelope.text(
                    f"Invalid {tool_name} parameters: {_summarize_errors(exc)}",
                    is_error=True,
                )
            result = await self.executor.execute(target or self.default_target, descriptor)
            return render_result(result)
        except Exception as exc:
            logger.exception("tool_call_crashed")
            return ResponseEnvelope.text(f"{tool_name} failed: {exc}", is_error=True)
        finally:
            clear_logging_context()


def _summarize_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "params"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
