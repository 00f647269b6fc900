"""Environment configuration for UniCloudDB-MCP.

Configuration via environment:
    DB_SERVICE_URL: Database service URL (default: the bundled endpoint)
    REQUEST_TIMEOUT: Request timeout in milliseconds (default: 30000)
    UNICLOUDDB_LOG_LEVEL: Log level (default: INFO)
    UNICLOUDDB_ENV: Runtime environment name (default: development)
"""

from __future__ import annotations

import os

from pydantic import ValidationError

from uniclouddb_mcp.models import ServiceTarget

DEFAULT_DB_SERVICE_URL = "https://fc-mp-.next.bspapp.com/mcp"
DEFAULT_REQUEST_TIMEOUT_MS = 30000


class ConfigurationError(RuntimeError):
    """Raised when startup configuration cannot be resolved."""


def get_db_service_url() -> str:
    value = os.getenv("DB_SERVICE_URL", "").strip()
    return value or DEFAULT_DB_SERVICE_URL


def get_request_timeout_ms() -> int:
    """Return the request timeout in milliseconds.

    Raises:
        ConfigurationError: If REQUEST_TIMEOUT is not a positive integer.
    """
    raw = os.getenv("REQUEST_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT_MS
    try:
        timeout_ms = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"REQUEST_TIMEOUT must be an integer number of milliseconds, got {raw!r}"
        ) from exc
    if timeout_ms <= 0:
        raise ConfigurationError(f"REQUEST_TIMEOUT must be positive, got {timeout_ms}")
    return timeout_ms


def get_log_level() -> str:
    return os.getenv("UNICLOUDDB_LOG_LEVEL", "INFO")


def get_environment() -> str:
    return os.getenv("UNICLOUDDB_ENV", "development").strip().lower() or "development"


def is_development() -> bool:
    return get_environment() == "development"


def load_service_target(url_override: str | None = None) -> ServiceTarget:
    """Resolve the service target from the environment.

    Args:
        url_override: URL taking precedence over DB_SERVICE_URL.

    Raises:
        ConfigurationError: If the URL or timeout is invalid.
    """
    url = (url_override or "").strip() or get_db_service_url()
    timeout_ms = get_request_timeout_ms()
    try:
        return ServiceTarget(url=url, timeout_ms=timeout_ms)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid service target: {exc}") from exc
