"""Pydantic models for UniCloudDB-MCP.

This module defines the data structures shared by the executor and the tool
adapter:
- Operation descriptors sent to the database service
- Service targets (endpoint URL and timeout)
- Normalized operation results and error kinds
- Response envelopes returned to MCP clients

All models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

QUERY = "query"
INSERT = "insert"
UPDATE = "update"
DELETE = "delete"

ACTIONS: tuple[str, ...] = (QUERY, INSERT, UPDATE, DELETE)

# Wire fields sent for each action, in body order.
ACTION_FIELDS: dict[str, tuple[str, ...]] = {
    QUERY: ("collection", "action", "where", "field", "orderBy", "limit", "skip"),
    INSERT: ("collection", "action", "data"),
    UPDATE: ("collection", "action", "where", "data"),
    DELETE: ("collection", "action", "where"),
}


class ErrorKind:
    """Failure categories of an operation."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    PROTOCOL = "protocol"
    REMOTE = "remote"
    VALIDATION = "validation"


class OrderBy(BaseModel):
    """Sort specification for a query.

    Attributes:
        field: Name of the field to sort on.
        order: Sort direction, ``asc`` or ``desc``.
    """

    field: str = Field(..., description="Field to sort on")
    order: Literal["asc", "desc"] = Field(..., description="Sort direction")


class OperationDescriptor(BaseModel):
    """One database action and its parameters.

    ``None`` marks an absent optional field. Falsy values such as ``limit=0``
    or ``where={}`` are present values and are sent as-is.

    Attributes:
        collection: Target collection name.
        action: One of ``query``, ``insert``, ``update`` or ``delete``.
        where: JQL filter.
        data: Record(s) to insert, or fields to update.
        field: JQL projection.
        order_by: Sort specification (``orderBy`` on the wire).
        limit: Maximum number of records to return.
        skip: Number of records to skip.

    Example:
        ```python
        descriptor = OperationDescriptor(
            collection="users",
            action="query",
            where={"age": {"$gt": 18}},
            orderBy={"field": "age", "order": "desc"},
            limit=10,
        )
        ```
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    collection: str = Field(..., description="Collection name")
    action: str = Field(..., description="Database action")
    where: dict[str, Any] | None = Field(default=None, description="JQL filter")
    data: dict[str, Any] | list[Any] | None = Field(
        default=None, description="Record data"
    )
    field: dict[str, Any] | None = Field(default=None, description="JQL projection")
    order_by: OrderBy | None = Field(
        default=None, alias="orderBy", description="Sort specification"
    )
    limit: int | None = Field(default=None, description="Maximum records returned")
    skip: int | None = Field(default=None, description="Records to skip")

    def to_operation(self) -> dict[str, Any]:
        """Return the wire ``operation`` object for this descriptor's action.

        Only the fields the action carries are included, and absent fields are
        left out rather than sent as ``null``.
        """
        values: dict[str, Any] = {
            "collection": self.collection,
            "action": self.action,
            "where": self.where,
            "data": self.data,
            "field": self.field,
            "orderBy": self.order_by.model_dump() if self.order_by else None,
            "limit": self.limit,
            "skip": self.skip,
        }
        operation: dict[str, Any] = {}
        for name in ACTION_FIELDS.get(self.action, ("collection", "action")):
            value = values[name]
            if value is not None:
                operation[name] = value
        return operation


class ServiceTarget(BaseModel):
    """Remote database endpoint and request timeout.

    Resolved once at startup. Instances are immutable; use ``with_url`` for a
    per-call endpoint override.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(..., description="Database service URL")
    timeout_ms: int = Field(
        default=30000, alias="timeoutMs", gt=0, description="Request timeout in ms"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Ensure the service URL is non-empty."""
        if not value or not value.strip():
            raise ValueError("url must be non-empty")
        return value.strip()

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def with_url(self, url: str | None) -> ServiceTarget:
        """Return a copy pointing at ``url``, or self when no override is given."""
        if not url:
            return self
        return ServiceTarget(url=url, timeout_ms=self.timeout_ms)


class OperationResult(BaseModel):
    """Normalized outcome of one operation.

    Attributes:
        ok: Whether the remote service reported success.
        payload: The service's ``data`` field on success, passed through verbatim.
        error_kind: Failure category (see ``ErrorKind``) on failure.
        message: Human-readable failure description.
    """

    ok: bool = Field(..., description="Whether the operation succeeded")
    payload: Any = Field(default=None, description="Remote data on success")
    error_kind: str | None = Field(default=None, description="Failure category")
    message: str | None = Field(default=None, description="Failure description")

    @classmethod
    def success(cls, payload: Any) -> OperationResult:
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, error_kind: str, message: str) -> OperationResult:
        return cls(ok=False, error_kind=error_kind, message=message)


class TextContent(BaseModel):
    """Text content block of a response envelope."""

    type: Literal["text"] = "text"
    text: str


class ResponseEnvelope(BaseModel):
    """Uniform tool response returned to MCP clients.

    ``isError`` is only present on failures; ``to_dict`` drops it otherwise.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent] = Field(..., description="Response content blocks")
    is_error: bool | None = Field(
        default=None, alias="isError", description="Set on failures"
    )

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> ResponseEnvelope:
        return cls(content=[TextContent(text=text)], is_error=True if is_error else None)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape."""
        return self.model_dump(by_alias=True, exclude_none=True)
