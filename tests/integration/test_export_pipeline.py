"""
Integration tests for the export pipeline: setup, transform, build and upload
"""

import json
import re
import pytest
from unittest.mock import AsyncMock
from core.config import Settings
from core.exceptions import ConfigurationError, SchemaBootstrapError, WarehouseQueryError
from core.warehouse import QueryResult
from export.runner import EventExporter, create_exporter, setup_export
from export.scheduler import ExportScheduler
from models.base import UploadStatus
from schemas.events import RawEvent


class RecordingExecutor:
    """Execute primitive that records statements and fails a set number of times"""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.calls = []

    async def __call__(self, query, values, config):
        self.calls.append((query, list(values)))
        if self.failures > 0:
            self.failures -= 1
            return QueryResult(error=WarehouseQueryError("server closed the connection unexpectedly"))
        return QueryResult()


@pytest.mark.asyncio
async def test_two_events_become_one_insert(export_context, mock_scheduler, pageview_event, autocapture_event):
    """One normal and one autocapture event -> one INSERT with 22 placeholders"""
    executor = RecordingExecutor()
    exporter = EventExporter(export_context, mock_scheduler, executor)

    status = await exporter.export_events([pageview_event, autocapture_event])

    assert status == UploadStatus.DONE
    assert len(executor.calls) == 1

    query, values = executor.calls[0]
    placeholders = re.findall(r"\$(\d+)", query)
    assert [int(p) for p in placeholders] == list(range(1, 23))
    assert query.count("), (") == 1
    assert len(values) == 22

    # Row 2 elements column
    assert json.loads(values[11 + 3]) == [
        {"tag_name": "button", "$el_text": "Sign up", "nth_child": 1, "attr__class": "btn"}
    ]
    assert values[3] == "{}"
    assert "$elements" not in json.loads(values[11 + 2])
    mock_scheduler.enqueue_after.assert_not_called()


@pytest.mark.asyncio
async def test_ignored_events_never_reach_insert(export_context, mock_scheduler, pageview_event):
    executor = RecordingExecutor()
    exporter = EventExporter(export_context, mock_scheduler, executor)
    pageleave = RawEvent(event="$pageleave", distinct_id="user_001", team_id=2, uuid="leave-1")

    await exporter.export_events([pageleave, pageview_event, pageleave])

    query, values = executor.calls[0]
    assert len(values) == 11
    assert "$pageleave" not in values
    assert "leave-1" not in values
    assert values[1] == "$pageview"


@pytest.mark.asyncio
async def test_fully_ignored_batch_is_not_sent(export_context, mock_scheduler):
    executor = RecordingExecutor()
    exporter = EventExporter(export_context, mock_scheduler, executor)
    pageleave = RawEvent(event="$pageleave", distinct_id="user_001", team_id=2)

    status = await exporter.export_events([pageleave])

    assert status is None
    assert executor.calls == []


@pytest.mark.asyncio
async def test_retry_delivers_same_batch(export_context, mock_scheduler, pageview_event):
    """First attempt fails, the scheduled retry succeeds with the same rows"""
    executor = RecordingExecutor(failures=1)
    exporter = EventExporter(export_context, mock_scheduler, executor)

    first = await exporter.export_events([pageview_event])
    assert first == UploadStatus.RESCHEDULED

    retry_payload, delay_ms = mock_scheduler.enqueue_after.call_args.args
    assert delay_ms == 5000
    assert retry_payload.retries_performed_so_far == 1

    second = await exporter.upload_batch(retry_payload)

    assert second == UploadStatus.DONE
    assert len(executor.calls) == 2
    assert executor.calls[0] == executor.calls[1]


@pytest.mark.asyncio
async def test_persistent_failure_is_abandoned_after_five_retries(export_context, mock_scheduler, pageview_event):
    executor = RecordingExecutor(failures=100)
    exporter = EventExporter(export_context, mock_scheduler, executor)

    status = await exporter.export_events([pageview_event])
    delays = []
    batch_ids = set()

    while status == UploadStatus.RESCHEDULED:
        payload, delay_ms = mock_scheduler.enqueue_after.call_args.args
        delays.append(delay_ms)
        batch_ids.add(payload.batch_id)
        mock_scheduler.enqueue_after.reset_mock()
        status = await exporter.upload_batch(payload)

    assert status == UploadStatus.ABANDONED
    assert delays == [5000, 10000, 20000, 40000, 80000]
    assert len(batch_ids) == 1
    assert len(executor.calls) == 6


@pytest.mark.asyncio
async def test_delivery_errors_never_raise(export_context, pageview_event):
    """A failed first attempt lands in APScheduler instead of raising"""
    executor = AsyncMock(return_value=QueryResult(error=WarehouseQueryError("timeout")))
    scheduler = ExportScheduler()
    exporter = create_exporter(context=export_context, scheduler=scheduler, executor=executor)

    status = await exporter.export_events([pageview_event])

    assert status == UploadStatus.RESCHEDULED
    assert len(scheduler.pending_jobs()) == 1


class TestSetupExport:
    """Test startup setup"""

    @pytest.mark.asyncio
    async def test_builds_context(self, export_settings):
        values = export_settings.dict()
        values["TABLE_NAME"] = "my table!"
        values["EVENTS_TO_IGNORE"] = "$pageleave, $feature_flag_called"
        config = Settings(**values)
        executor = RecordingExecutor()

        context = await setup_export(config, executor)

        assert context.table_name == "mytable"
        assert context.events_to_ignore == frozenset({"$pageleave", "$feature_flag_called"})
        assert context.config is config
        assert executor.calls[0][0].startswith("CREATE TABLE IF NOT EXISTS public.mytable (")

    @pytest.mark.asyncio
    async def test_context_is_immutable(self, export_settings):
        context = await setup_export(export_settings, RecordingExecutor())

        with pytest.raises(Exception):
            context.table_name = "other"

    @pytest.mark.asyncio
    async def test_config_error_stops_before_connecting(self, export_settings):
        values = export_settings.dict()
        values["DB_PASSWORD"] = None
        executor = RecordingExecutor()

        with pytest.raises(ConfigurationError):
            await setup_export(Settings(**values), executor)

        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_table_failure_is_fatal(self, export_settings):
        with pytest.raises(SchemaBootstrapError, match="server closed the connection"):
            await setup_export(export_settings, RecordingExecutor(failures=1))


@pytest.mark.asyncio
async def test_create_exporter_registers_retry_job(export_context, succeeding_executor):
    scheduler = ExportScheduler()

    exporter = create_exporter(export_context, scheduler, succeeding_executor)

    assert scheduler._job == exporter.upload_batch
