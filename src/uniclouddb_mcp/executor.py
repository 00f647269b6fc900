"""Operation executor for the JQL database service.

The executor turns one ``OperationDescriptor`` into exactly one HTTP POST,
bounded by the target's timeout, and normalizes every outcome into an
``OperationResult``:

1. Validate the descriptor (no request is sent for an invalid one)
2. Build the ``{"operation": {...}}`` body for the action
3. Send it and wait for the reply or the timeout
4. Decode the ``{"code", "data", "msg"}`` reply

There are no retries; mutating actions are sent once.
"""

from __future__ import annotations

import asyncio
import time
from types import TracebackType
from typing import Any

import httpx

from uniclouddb_mcp.logging import get_logger
from uniclouddb_mcp.models import (
    ACTIONS,
    DELETE,
    INSERT,
    UPDATE,
    ErrorKind,
    OperationDescriptor,
    OperationResult,
    ServiceTarget,
)

logger = get_logger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class OperationError(Exception):
    """Typed operation failure carrying an ``ErrorKind``."""

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


class OperationExecutor:
    """Send database operations to a ``ServiceTarget``."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient()

    async def execute(
        self, target: ServiceTarget, descriptor: OperationDescriptor
    ) -> OperationResult:
        """Execute one operation and return its normalized result."""
        start = time.perf_counter()
        try:
            validate_descriptor(descriptor)
            payload = await self._send(target, descriptor)
        except OperationError as exc:
            logger.warning(
                "operation_failed",
                action=descriptor.action,
                collection=descriptor.collection,
                error_kind=exc.kind,
                error=exc.message,
                duration_ms=_elapsed_ms(start),
            )
            return OperationResult.failure(exc.kind, exc.message)

        logger.info(
            "operation_succeeded",
            action=descriptor.action,
            collection=descriptor.collection,
            duration_ms=_elapsed_ms(start),
        )
        return OperationResult.success(payload)

    async def _send(self, target: ServiceTarget, descriptor: OperationDescriptor) -> Any:
        action = descriptor.action
        body = {"operation": descriptor.to_operation()}
        logger.debug(
            "operation_dispatched",
            action=action,
            collection=descriptor.collection,
            url=target.url,
            timeout_ms=target.timeout_ms,
        )
        try:
            async with asyncio.timeout(target.timeout_seconds):
                response = await self._client.post(
                    target.url,
                    json=body,
                    headers=_JSON_HEADERS,
                    timeout=target.timeout_seconds,
                )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise OperationError(
                ErrorKind.TIMEOUT,
                f"{action} timed out: request exceeded {target.timeout_ms} ms",
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            detail = str(exc) or exc.__class__.__name__
            raise OperationError(
                ErrorKind.NETWORK, f"{action} request failed: {detail}"
            ) from exc

        return decode_reply(action, response)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> OperationExecutor:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def validate_descriptor(descriptor: OperationDescriptor) -> None:
    """Raise a validation ``OperationError`` for a malformed descriptor."""
    action = descriptor.action
    if action not in ACTIONS:
        raise OperationError(
            ErrorKind.VALIDATION,
            f"Invalid operation: unknown action {action!r} "
            f"(expected one of {', '.join(ACTIONS)})",
        )
    if not descriptor.collection or not descriptor.collection.strip():
        raise OperationError(
            ErrorKind.VALIDATION, f"Invalid operation: {action} requires a collection"
        )
    if action in (UPDATE, DELETE) and descriptor.where is None:
        raise OperationError(
            ErrorKind.VALIDATION,
            f"Invalid operation: {action} requires a where filter",
        )
    if action in (INSERT, UPDATE) and descriptor.data is None:
        raise OperationError(
            ErrorKind.VALIDATION, f"Invalid operation: {action} requires data"
        )


def decode_reply(action: str, response: httpx.Response) -> Any:
    """Return the ``data`` field of a successful reply.

    The HTTP status is not consulted; the ``code`` field is the only success
    signal.
    """
    try:
        reply = response.json()
    except ValueError as exc:
        raise OperationError(
            ErrorKind.PROTOCOL, f"{action} failed: malformed response"
        ) from exc
    if not isinstance(reply, dict):
        raise OperationError(ErrorKind.PROTOCOL, f"{action} failed: malformed response")

    code = reply.get("code")
    if isinstance(code, bool) or code != 0:
        message = reply.get("msg")
        if not isinstance(message, str) or not message:
            message = f"{action} failed"
        raise OperationError(ErrorKind.REMOTE, message)
    return reply.get("data")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
