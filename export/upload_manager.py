"""
Deliver batches to Redshift with exponential-backoff retries.

Per payload:
    upload -> success                      -> DONE
           -> failure, retries < ceiling   -> RESCHEDULED (new payload, retries + 1)
           -> failure, retries >= ceiling  -> ABANDONED (batch dropped)

Backoff is 2**retries * base delay: 5s, 10s, 20s, 40s, 80s with the defaults.
"""

from typing import Optional, TYPE_CHECKING
import logging

from core.warehouse import QueryExecutor, execute_query
from export.batch_builder import build_insert_statement
from export.scheduler import RetryScheduler
from models.base import UploadStatus
from schemas.events import UploadJobPayload

if TYPE_CHECKING:
    from export.runner import ExportContext

logger = logging.getLogger(__name__)


def _plural(count: int) -> str:
    return "event" if count == 1 else "events"


class UploadManager:
    """
    Runs one upload attempt per call and decides what happens on failure.

    Retries never block: a failed attempt hands the next payload to the
    scheduler and returns straight away.
    """

    def __init__(
        self,
        context: "ExportContext",
        scheduler: RetryScheduler,
        executor: QueryExecutor = execute_query,
        max_retries: Optional[int] = None,
        base_delay_ms: Optional[int] = None
    ):
        self.context = context
        self.scheduler = scheduler
        self.executor = executor
        self.max_retries = context.config.UPLOAD_MAX_RETRIES if max_retries is None else max_retries
        self.base_delay_ms = context.config.RETRY_BASE_DELAY_MS if base_delay_ms is None else base_delay_ms

    def retry_delay_ms(self, retries_performed_so_far: int) -> int:
        return 2 ** retries_performed_so_far * self.base_delay_ms

    async def upload(self, payload: UploadJobPayload) -> UploadStatus:
        """
        Insert the payload's batch in one statement.

        Returns:
            DONE on success, otherwise the outcome of schedule_retry
        """
        count = len(payload.batch)
        statement = build_insert_statement(self.context.table_name, payload.batch)

        logger.info(
            f"(Batch Id: {payload.batch_id}) Flushing {count} {_plural(count)} to Redshift"
        )

        result = await self.executor(statement.query, statement.values, self.context.config)

        if result.ok:
            logger.info(
                f"(Batch Id: {payload.batch_id}) Flushed {count} {_plural(count)} "
                f"into {self.context.table_name}"
            )
            return UploadStatus.DONE

        logger.error(
            f"(Batch Id: {payload.batch_id}) Error uploading to Redshift: {result.message}",
            extra={"error_context": result.error.to_dict()}
        )
        return self.schedule_retry(payload)

    def schedule_retry(self, payload: UploadJobPayload) -> UploadStatus:
        if payload.retries_performed_so_far >= self.max_retries:
            logger.error(
                f"(Batch Id: {payload.batch_id}) Giving up after "
                f"{payload.retries_performed_so_far} retries; "
                f"dropping {len(payload.batch)} {_plural(len(payload.batch))}"
            )
            return UploadStatus.ABANDONED

        next_retry_ms = self.retry_delay_ms(payload.retries_performed_so_far)
        self.scheduler.enqueue_after(payload.next_attempt(), next_retry_ms)

        logger.info(f"Enqueued batch {payload.batch_id} for retry in {next_retry_ms}ms")
        return UploadStatus.RESCHEDULED
