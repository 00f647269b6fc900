"""UniCloudDB-MCP CLI entrypoint.

Usage:
    python -m uniclouddb_mcp              # Serve the MCP tools over stdio
    python -m uniclouddb_mcp --check      # Query the database service once
    python -m uniclouddb_mcp --version    # Print version
    python -m uniclouddb_mcp --help       # Show help
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from uniclouddb_mcp import __version__
from uniclouddb_mcp.config import ConfigurationError, get_log_level, load_service_target
from uniclouddb_mcp.executor import OperationExecutor
from uniclouddb_mcp.logging import configure_logging, get_logger
from uniclouddb_mcp.models import ErrorKind, OperationDescriptor, ServiceTarget

logger = get_logger(__name__)

DEFAULT_CHECK_COLLECTION = "information"
DEFAULT_CHECK_LIMIT = 5

_CHECK_HINTS = {
    ErrorKind.TIMEOUT: "The database service did not respond; check DB_SERVICE_URL.",
    ErrorKind.NETWORK: "The database service is unreachable; check DB_SERVICE_URL.",
    ErrorKind.PROTOCOL: "The URL answered but is not a JQL database service.",
    ErrorKind.REMOTE: "The service rejected the query; check permissions or the collection.",
    ErrorKind.VALIDATION: "The check parameters are invalid.",
}


async def run_check(target: ServiceTarget, collection: str, limit: int) -> int:
    """Query ``collection`` once and report whether the service works."""
    print(f"Database service URL: {target.url}")
    print(f"Querying {collection} (limit {limit})...")
    descriptor = OperationDescriptor(
        collection=collection,
        action="query",
        where={},
        orderBy={"field": "_id", "order": "desc"},
        limit=limit,
    )
    async with OperationExecutor() as executor:
        result = await executor.execute(target, descriptor)

    if not result.ok:
        print(f"✗ Check failed: {result.message}")
        hint = _CHECK_HINTS.get(result.error_kind or "")
        if hint:
            print(f"  {hint}")
        return 1

    print("✓ Query succeeded:")
    print(json.dumps(result.payload, indent=2, ensure_ascii=False))
    records = result.payload.get("data") if isinstance(result.payload, dict) else None
    if isinstance(records, list):
        print(f"Fetched {len(records)} record(s)")
    return 0


def serve(target: ServiceTarget) -> None:
    """Serve the tools over stdio until terminated."""
    from uniclouddb_mcp.server import create_server
    from uniclouddb_mcp.tools import ToolAdapter

    adapter = ToolAdapter(OperationExecutor(), target)
    server = create_server(adapter)
    logger.info("server_starting", url=target.url, timeout_ms=target.timeout_ms)
    server.run()


def main() -> None:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="uniclouddb-mcp",
        description="UniCloudDB-MCP - JQL database tools over the Model Context Protocol",
    )
    parser.add_argument(
        "--version", action="store_true", help="Print version and exit"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run one query against the database service and exit",
    )
    parser.add_argument(
        "--collection",
        default=DEFAULT_CHECK_COLLECTION,
        help="Collection queried by --check",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_CHECK_LIMIT,
        help="Number of records fetched by --check",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Database service URL (overrides DB_SERVICE_URL)",
    )
    args = parser.parse_args()

    if args.version:
        print(f"UniCloudDB-MCP v{__version__}")
        sys.exit(0)

    configure_logging(get_log_level())
    try:
        target = load_service_target(args.db_url)
    except ConfigurationError as exc:
        logger.error("configuration_invalid", error=str(exc))
        sys.exit(1)

    if args.check:
        sys.exit(asyncio.run(run_check(target, args.collection, args.limit)))

    try:
        serve(target)
    except Exception:
        logger.exception("server_failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
