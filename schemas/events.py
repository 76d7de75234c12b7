"""
Pydantic schemas for inbound events, warehouse rows and upload jobs
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any


class RawEvent(BaseModel):
    """
    An analytics event as delivered by the host pipeline.

    The $set / $set_once directives arrive under their $-prefixed wire names;
    set / set_once are accepted as well. Identity fields are optional: an
    event without them is still exported, with empty or NULL columns.
    """

    event: str = ""
    distinct_id: str = ""
    team_id: Optional[int] = None
    properties: Optional[Dict[str, Any]] = None
    set: Optional[Any] = Field(None, alias="$set")
    set_once: Optional[Any] = Field(None, alias="$set_once")
    site_url: Optional[Any] = None
    ip: Optional[Any] = None
    uuid: Optional[str] = None

    # Timestamp sources, in order of preference: timestamp, properties.timestamp, now, sent_at
    timestamp: Optional[Any] = None
    now: Optional[Any] = None
    sent_at: Optional[Any] = None

    @validator("event", "distinct_id", pre=True)
    def coerce_to_text(cls, v):
        """Numeric distinct ids are common from server-side SDKs"""
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    class Config:
        populate_by_name = True
        extra = "ignore"


class ParsedEvent(BaseModel):
    """
    One warehouse row.

    Every field is a primitive; semi-structured fields are JSON text.
    timestamp is None when no source resolved to a parseable value, and
    team_id is None when the event carried none.
    """

    uuid: str
    event_name: str
    properties: str
    elements: str
    set: str
    set_once: str
    distinct_id: str
    team_id: Optional[int] = None
    ip: str
    site_url: str
    timestamp: Optional[str] = None

    class Config:
        frozen = True


class UploadJobPayload(BaseModel):
    """Unit of upload work, recreated on each retry"""

    batch: List[ParsedEvent]
    batch_id: int
    retries_performed_so_far: int = Field(0, ge=0)

    def next_attempt(self) -> "UploadJobPayload":
        """Same batch and id, one more retry on the counter"""
        return UploadJobPayload(
            batch=self.batch,
            batch_id=self.batch_id,
            retries_performed_so_far=self.retries_performed_so_far + 1,
        )
