"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy, degraded")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    warehouse_connected: bool
    warehouse_error: Optional[str] = None
    table_name: str
    events_to_ignore: List[str] = Field(default_factory=list)
    pending_retries: int = 0

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "warehouse_connected": True,
                "table_name": "posthog_event",
                "events_to_ignore": ["$pageleave"],
                "pending_retries": 0,
            }
        }


# ============================================================================
# Export Schemas
# ============================================================================

class ExportAcceptedResponse(BaseModel):
    """Returned once a batch has been handed to the exporter"""
    status: str = "accepted"
    events_received: int
    events_dropped: int = 0
    request_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "accepted",
                "events_received": 2,
                "events_dropped": 0,
                "request_id": "5f1c0b7e-8d0a-4c1e-9d55-2d8f0b1a2c3d",
            }
        }
