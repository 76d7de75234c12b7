"""
Idempotent bootstrap of the destination table
"""

import logging

from core.config import Settings
from core.exceptions import SchemaBootstrapError
from core.warehouse import QueryExecutor, execute_query
from models.events_table import build_events_table, render_create_table

logger = logging.getLogger(__name__)


def create_table_statement(table_name: str) -> str:
    """DDL for the events table under the given (sanitized) name"""
    return render_create_table(build_events_table(table_name))


async def ensure_events_table(
    table_name: str,
    config: Settings,
    executor: QueryExecutor = execute_query
) -> None:
    """
    Create the events table if it does not exist yet.

    Safe to run on every start.

    Raises:
        SchemaBootstrapError: If the statement fails for any reason
    """
    logger.info(f"Ensuring Redshift table public.{table_name} exists")

    result = await executor(create_table_statement(table_name), [], config)

    if not result.ok:
        raise SchemaBootstrapError(
            f"Unable to connect to Redshift cluster and create table with error: {result.message}",
            context={"table_name": table_name, "host": config.CLUSTER_HOST},
            original_exception=result.error
        )

    logger.info(f"Redshift table public.{table_name} is ready")
