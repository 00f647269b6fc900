"""UniCloudDB-MCP: JQL database tools for AI assistants.

UniCloudDB-MCP exposes a uniCloud document database to MCP clients. Each tool
call is translated into a single JSON POST against the database service and
the service reply is normalized into a text envelope.

Tools:
    - query: Read records with a JQL filter, projection, ordering and paging
    - add: Insert records
    - update: Update records matching a filter
    - remove: Delete records matching a filter

Example:
    >>> from uniclouddb_mcp.executor import OperationExecutor
    >>> from uniclouddb_mcp.models import OperationDescriptor, ServiceTarget
    >>> target = ServiceTarget(url="https://example.com/mcp", timeout_ms=5000)
    >>> async with OperationExecutor() as executor:
    ...     result = await executor.execute(
    ...         target,
    ...         OperationDescriptor(collection="users", action="query", limit=10),
    ...     )
"""

__all__ = ["__version__"]

__version__ = "1.0.3"
