"""
Pytest configuration and fixtures
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from core.config import Settings
from core.exceptions import WarehouseQueryError
from core.warehouse import QueryResult
from export.runner import ExportContext
from schemas.events import RawEvent


@pytest.fixture
def export_settings():
    """Settings pointing at a fake Redshift cluster"""
    return Settings(
        CLUSTER_HOST="analytics.abc123xyz.us-east-1.redshift.amazonaws.com",
        CLUSTER_PORT="5439",
        DB_NAME="dev",
        DB_USERNAME="exporter",
        DB_PASSWORD="s3cret",
        TABLE_NAME="posthog_event",
        EVENTS_TO_IGNORE="",
        UPLOAD_MAX_RETRIES=5,
        RETRY_BASE_DELAY_MS=5000,
    )


@pytest.fixture
def export_context(export_settings):
    return ExportContext(
        config=export_settings,
        table_name="posthog_event",
        events_to_ignore=frozenset({"$pageleave"}),
    )


@pytest.fixture
def succeeding_executor():
    """Execute primitive that always succeeds"""
    return AsyncMock(return_value=QueryResult())


@pytest.fixture
def failing_executor():
    """Execute primitive that always fails like a refused connection"""
    error = WarehouseQueryError(
        "connect ECONNREFUSED",
        original_exception=ConnectionRefusedError("connect ECONNREFUSED")
    )
    return AsyncMock(return_value=QueryResult(error=error))


@pytest.fixture
def mock_scheduler():
    scheduler = MagicMock()
    scheduler.enqueue_after = MagicMock()
    return scheduler


@pytest.fixture
def mock_pageview_data():
    """A plain pageview as sent by posthog-js"""
    return {
        "event": "$pageview",
        "distinct_id": "user_001",
        "team_id": 2,
        "uuid": "017a6e2c-1f3a-0000-4a2b-6c1d2e3f4a5b",
        "site_url": "https://app.example.com",
        "ip": "10.0.0.1",
        "timestamp": "2021-06-01T12:30:00.123Z",
        "properties": {
            "$current_url": "https://app.example.com/pricing",
            "$browser": "Firefox",
            "$ip": "203.0.113.7",
        },
        "$set": {"email": "user@example.com"},
        "$set_once": {"initial_referrer": "$direct"},
    }


@pytest.fixture
def mock_autocapture_data():
    """An autocaptured click with a single element"""
    return {
        "event": "$autocapture",
        "distinct_id": "user_001",
        "team_id": 2,
        "uuid": "017a6e2c-1f3a-0001-4a2b-6c1d2e3f4a5b",
        "site_url": "https://app.example.com",
        "now": "2021-06-01T12:31:00Z",
        "properties": {
            "$event_type": "click",
            "$elements": [
                {"tag_name": "button", "$el_text": "Sign up", "nth_child": 1, "attr__class": "btn"}
            ],
        },
    }


@pytest.fixture
def pageview_event(mock_pageview_data):
    return RawEvent(**mock_pageview_data)


@pytest.fixture
def autocapture_event(mock_autocapture_data):
    return RawEvent(**mock_autocapture_data)
