# ============================================================================
# File: export/runner.py
# Description: Startup setup and the inbound export entry point
# ============================================================================
"""
Export Runner - wires sanitizer, table bootstrap, transform, batch build and upload.

Startup:
    setup_export() validates configuration, sanitizes the table name, ensures
    the table exists and parses the ignore list into an immutable
    ExportContext. Any failure here is fatal.

Per batch:
    EventExporter.export_events() filters ignored events, transforms the
    rest, and awaits the first upload attempt. Delivery failures are handled
    by UploadManager and never reach the caller.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional
import logging
import random

from core.config import Settings
from core.warehouse import QueryExecutor, execute_query
from export.sanitizer import sanitize_sql_identifier
from export.scheduler import ExportScheduler, RetryScheduler
from export.schema_manager import ensure_events_table
from export.transformer import filter_ignored_events, transform_event
from export.upload_manager import UploadManager
from models.base import UploadStatus
from schemas.events import ParsedEvent, RawEvent, UploadJobPayload

logger = logging.getLogger(__name__)

MAX_BATCH_ID = 1_000_000


@dataclass(frozen=True)
class ExportContext:
    """Process-wide state, built once at startup and never mutated"""
    config: Settings
    table_name: str
    events_to_ignore: FrozenSet[str]


async def setup_export(config: Settings, executor: QueryExecutor = execute_query) -> ExportContext:
    """
    Prepare everything the exporter needs before the first batch.

    Raises:
        ConfigurationError: Missing or malformed options
        SchemaBootstrapError: The destination table could not be ensured
    """
    config.validate_export_config()

    table_name = sanitize_sql_identifier(config.TABLE_NAME)
    if table_name != config.TABLE_NAME:
        logger.warning(f"Table name {config.TABLE_NAME!r} sanitized to {table_name!r}")

    await ensure_events_table(table_name, config, executor)

    context = ExportContext(
        config=config,
        table_name=table_name,
        events_to_ignore=config.events_to_ignore(),
    )

    logger.info(
        f"Export ready: table={context.table_name}, "
        f"ignoring={sorted(context.events_to_ignore) or 'nothing'}"
    )
    return context


class EventExporter:
    """
    Entry point the host pipeline calls with each batch of events.

    Responsibilities:
    - Drop ignored event names before any transformation
    - Transform events into rows
    - Create the upload payload and run the first attempt
    - Serve as the scheduled job for retries
    """

    def __init__(
        self,
        context: ExportContext,
        scheduler: RetryScheduler,
        executor: QueryExecutor = execute_query
    ):
        self.context = context
        self.upload_manager = UploadManager(context, scheduler, executor)

    def build_batch(self, events: Iterable[RawEvent]) -> List[ParsedEvent]:
        kept = filter_ignored_events(events, self.context.events_to_ignore)
        return [transform_event(event) for event in kept]

    async def export_events(self, events: Iterable[RawEvent]) -> Optional[UploadStatus]:
        """
        Export one inbound batch.

        Returns:
            Outcome of the first upload attempt, or None when every event
            in the batch was ignored
        """
        events = list(events)
        batch = self.build_batch(events)

        if not batch:
            logger.info(f"All {len(events)} events in batch are ignored; nothing to export")
            return None

        payload = UploadJobPayload(
            batch=batch,
            batch_id=random.randrange(MAX_BATCH_ID),
            retries_performed_so_far=0,
        )
        return await self.upload_manager.upload(payload)

    async def upload_batch(self, payload: UploadJobPayload) -> UploadStatus:
        """Scheduled retry job"""
        return await self.upload_manager.upload(payload)


def create_exporter(
    context: ExportContext,
    scheduler: ExportScheduler,
    executor: QueryExecutor = execute_query
) -> EventExporter:
    """Build an exporter and register its retry job with the scheduler"""
    exporter = EventExporter(context, scheduler, executor)
    scheduler.register_job(exporter.upload_batch)
    return exporter
