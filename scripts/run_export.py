"""
Export events from a newline-delimited JSON file into Redshift.

Usage:
    python scripts/run_export.py events.jsonl [--batch-size 500]

Each line is one event. Events are sent in batches; the script stays up
until every scheduled retry has either succeeded or been dropped.
"""

import argparse
import asyncio
import json
import sys
import os
import logging
from typing import Iterator, List

# Add current directory to path to allow imports from core, export, etc.
sys.path.append(os.getcwd())

from pydantic import ValidationError
from core.config import settings
from core.exceptions import ConfigurationError, SchemaBootstrapError
from core.logging import setup_logging
from export.runner import setup_export, create_exporter
from export.scheduler import ExportScheduler
from models.base import UploadStatus
from schemas.events import RawEvent

setup_logging()
logger = logging.getLogger(__name__)


def read_events(path: str) -> Iterator[RawEvent]:
    """Yield valid events from a JSONL file, skipping bad lines"""
    with open(path, encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield RawEvent(**json.loads(line))
            except (json.JSONDecodeError, ValidationError, TypeError) as e:
                logger.warning(f"Skipping line {line_number}: {str(e)}")


def chunked(events: Iterator[RawEvent], size: int) -> Iterator[List[RawEvent]]:
    batch: List[RawEvent] = []
    for event in events:
        batch.append(event)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


async def run_export(path: str, batch_size: int):
    """Run the export for one file"""

    context = await setup_export(settings)

    scheduler = ExportScheduler()
    exporter = create_exporter(context, scheduler)
    scheduler.start()

    outcomes = {status: 0 for status in UploadStatus}

    try:
        for batch in chunked(read_events(path), batch_size):
            status = await exporter.export_events(batch)
            if status is not None:
                outcomes[status] += 1

        logger.info(
            f"First attempts: {outcomes[UploadStatus.DONE]} done, "
            f"{outcomes[UploadStatus.RESCHEDULED]} rescheduled"
        )

        if scheduler.pending_jobs():
            logger.info(f"Waiting for {len(scheduler.pending_jobs())} scheduled retries")
            await scheduler.drain()

        logger.info("Export finished")
    finally:
        scheduler.stop()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export a JSONL file of events to Redshift")
    parser.add_argument("path", help="Newline-delimited JSON events")
    parser.add_argument("--batch-size", type=int, default=500)
    args = parser.parse_args()

    try:
        asyncio.run(run_export(args.path, args.batch_size))
    except (ConfigurationError, SchemaBootstrapError) as e:
        logger.error(str(e))
        sys.exit(1)
