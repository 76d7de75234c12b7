"""
Pydantic schemas for validation and serialization.

Schemas:
    events: Inbound events, warehouse rows and upload job payloads
    api: API endpoint response schemas

Usage:
    from schemas.events import RawEvent, ParsedEvent, UploadJobPayload
    from schemas.api import HealthCheckResponse, ExportAcceptedResponse

Example:
    event = RawEvent(**{
        "event": "$pageview",
        "distinct_id": "user_001",
        "team_id": 2,
        "$set": {"email": "user@example.com"},
    })
    assert event.set == {"email": "user@example.com"}

Validation:
    RawEvent fills missing identity fields with empty values; only
    wrongly typed fields (for example a non-numeric team_id) fail.
    ParsedEvent is frozen once built.
"""

__all__ = [
    "RawEvent",
    "ParsedEvent",
    "UploadJobPayload",
    "HealthCheckResponse",
    "ExportAcceptedResponse",
]
