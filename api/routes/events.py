"""
Inbound export endpoint for the host event pipeline
"""

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Request, status
from pydantic import ValidationError
from typing import Any, List
from api.dependencies import get_exporter
from export.runner import EventExporter
from schemas.api import ExportAcceptedResponse
from schemas.events import RawEvent
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events", tags=["Export"])


def parse_events(payload: List[Any]) -> List[RawEvent]:
    """Validate events one by one so a bad event does not sink its batch"""
    events = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning(f"Dropping event at position {position}: expected an object")
            continue
        try:
            events.append(RawEvent(**item))
        except ValidationError as e:
            logger.warning(
                f"Dropping malformed event at position {position}: "
                f"{e.error_count()} validation error(s)",
                extra={"validation_errors": e.errors()}
            )
    return events


@router.post(
    "/export",
    response_model=ExportAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED
)
async def export_events(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: List[Any] = Body(...),
    exporter: EventExporter = Depends(get_exporter)
):
    """
    Hand a batch of events to the exporter.

    Responds as soon as the batch is queued; delivery, retries and drops
    are reported in the service logs only. Events that fail validation
    are dropped individually and counted in the response.
    """
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Batch must contain at least one event"
        )

    events = parse_events(payload)
    if events:
        background_tasks.add_task(exporter.export_events, events)

    return ExportAcceptedResponse(
        events_received=len(payload),
        events_dropped=len(payload) - len(events),
        request_id=getattr(request.state, "request_id", None)
    )
