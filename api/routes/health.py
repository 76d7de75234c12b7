"""
Health check endpoint with warehouse connectivity and retry status
"""

from fastapi import APIRouter, Depends
from api.dependencies import get_context, get_scheduler
from core.warehouse import execute_query
from export.runner import ExportContext
from export.scheduler import ExportScheduler
from schemas.api import HealthCheckResponse
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    context: ExportContext = Depends(get_context),
    scheduler: ExportScheduler = Depends(get_scheduler)
):
    """
    Health check endpoint.

    Returns:
    - Warehouse connectivity status (SELECT 1 on a fresh connection)
    - Destination table and ignored event names
    - Number of retries waiting in the scheduler
    """
    result = await execute_query("SELECT 1", [], context.config)

    if not result.ok:
        logger.error(f"Redshift connection failed: {result.message}")

    return HealthCheckResponse(
        status="healthy" if result.ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        warehouse_connected=result.ok,
        warehouse_error=None if result.ok else result.message,
        table_name=context.table_name,
        events_to_ignore=sorted(context.events_to_ignore),
        pending_retries=len(scheduler.pending_jobs())
    )
