import logging
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional, Protocol

from apscheduler.events import (
    EVENT_JOB_ERROR,
    EVENT_JOB_EXECUTED,
    EVENT_JOB_MISSED,
    EVENT_JOB_SUBMITTED,
    JobEvent,
)
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from schemas.events import UploadJobPayload

logger = logging.getLogger(__name__)

UploadJob = Callable[[UploadJobPayload], Awaitable[object]]

JOB_FINISHED_EVENTS = EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED


class RetryScheduler(Protocol):
    """Anything that can run an upload job again later"""

    def enqueue_after(self, payload: UploadJobPayload, delay_ms: int) -> None:
        ...


class ExportScheduler:
    """
    APScheduler-backed retry scheduler.

    Each enqueue_after call adds a one-shot job; when it fires the registered
    upload job runs as its own task. Nothing waits on it.

    Job ids are left to APScheduler. batch_id is only a correlation id, so two
    batches may share it and must not replace each other's retries.
    """

    def __init__(self, job: Optional[UploadJob] = None):
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self._job = job
        self._in_flight = 0
        self.scheduler.add_listener(self._track_job, EVENT_JOB_SUBMITTED | JOB_FINISHED_EVENTS)

    def register_job(self, job: UploadJob) -> None:
        self._job = job

    def _track_job(self, event: JobEvent):
        # Fired jobs leave the job store before they run; count them from submission
        if event.code == EVENT_JOB_SUBMITTED:
            self._in_flight += 1
        else:
            self._in_flight = max(self._in_flight - 1, 0)

    async def run_upload_job(self, payload: UploadJobPayload):
        """Job body for a scheduled retry"""
        logger.info(
            f"Scheduler: Retrying batch {payload.batch_id} "
            f"(attempt {payload.retries_performed_so_far})"
        )
        try:
            await self._job(payload)
        except Exception:
            logger.exception(f"Scheduler: Upload job for batch {payload.batch_id} failed")

    def enqueue_after(self, payload: UploadJobPayload, delay_ms: int) -> None:
        if self._job is None:
            raise RuntimeError("No upload job registered with the export scheduler")

        run_date = datetime.now(timezone.utc) + timedelta(milliseconds=delay_ms)
        self.scheduler.add_job(
            self.run_upload_job,
            trigger=DateTrigger(run_date=run_date, timezone=timezone.utc),
            args=[payload],
            name=f"upload_batch_{payload.batch_id}_{payload.retries_performed_so_far}",
            misfire_grace_time=None,
        )

    def pending_jobs(self) -> List[Job]:
        return self.scheduler.get_jobs()

    async def drain(self, poll_seconds: float = 1.0):
        """Wait until every scheduled retry has run"""
        while self.pending_jobs() or self._in_flight:
            await asyncio.sleep(poll_seconds)

    def start(self):
        """Start the scheduler"""
        self.scheduler.start()
        logger.info("Export scheduler started")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Export scheduler stopped")
