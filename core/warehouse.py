"""
Warehouse connection primitive.

Every call opens its own asyncpg connection, runs exactly one statement and
closes the connection before returning. Redshift speaks the Postgres wire
protocol, so asyncpg's native $n placeholders are used as-is.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence
import logging

import asyncpg

from core.config import Settings
from core.exceptions import WarehouseQueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a single statement. error is None on success."""
    error: Optional[WarehouseQueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is None:
            return ""
        if self.error.original_exception is not None:
            return str(self.error.original_exception) or self.error.message
        return self.error.message


async def _configure_codecs(connection: asyncpg.Connection) -> None:
    # Rows carry ISO-8601 strings for the timestamp column
    await connection.set_type_codec(
        "timestamptz",
        encoder=str,
        decoder=str,
        schema="pg_catalog",
        format="text",
    )


QueryExecutor = Callable[[str, Sequence[Any], Settings], Awaitable[QueryResult]]


async def execute_query(query: str, values: Sequence[Any], config: Settings) -> QueryResult:
    """
    Run one statement against the Redshift cluster.

    Args:
        query: SQL text with $1..$n placeholders
        values: Positional values bound to the placeholders
        config: Settings carrying cluster host, port, database and credentials

    Returns:
        QueryResult, never raises
    """
    connection: Optional[asyncpg.Connection] = None
    error: Optional[WarehouseQueryError] = None

    try:
        connection = await asyncpg.connect(
            host=config.CLUSTER_HOST,
            port=config.cluster_port,
            user=config.DB_USERNAME,
            password=config.DB_PASSWORD,
            database=config.DB_NAME,
            timeout=config.CONNECT_TIMEOUT_SECONDS,
        )
        if values:
            await _configure_codecs(connection)
        await connection.execute(query, *values)
    except Exception as e:
        error = WarehouseQueryError(
            str(e) or type(e).__name__,
            context={
                "host": config.CLUSTER_HOST,
                "operation": query.split(None, 1)[0].upper() if query.strip() else "",
            },
            original_exception=e
        )
    finally:
        if connection is not None:
            try:
                await connection.close()
            except Exception as e:
                logger.warning(f"Failed to close Redshift connection cleanly: {str(e)}")

    return QueryResult(error=error)
