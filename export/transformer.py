"""
Map inbound events onto warehouse rows
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, AbstractSet
import json
import logging

from schemas.events import RawEvent, ParsedEvent

logger = logging.getLogger(__name__)

AUTOCAPTURE_EVENT = "$autocapture"
ELEMENTS_PROPERTY = "$elements"
IP_PROPERTY = "$ip"
EMPTY_JSON_OBJECT = "{}"


def _is_missing(value: Any) -> bool:
    """None and falsy scalars count as absent; empty containers do not"""
    if value is None:
        return True
    if isinstance(value, (str, int, float, bool)):
        return not value
    return False


def _to_json(value: Any) -> str:
    """JSON-encode a semi-structured field, "{}" when absent"""
    if _is_missing(value):
        return EMPTY_JSON_OBJECT
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse one timestamp candidate into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing "Z" included, naive values are taken
    as UTC), epoch milliseconds and datetime objects. Returns None for
    anything else.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2021-01-01T00:00:00.000Z"""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_timestamp(event: RawEvent) -> Optional[str]:
    properties = event.properties or {}
    candidates = (event.timestamp, properties.get("timestamp"), event.now, event.sent_at)

    for candidate in candidates:
        parsed = parse_timestamp(candidate)
        if parsed is not None:
            return format_timestamp(parsed)

    logger.warning(
        f"No parseable timestamp for event {event.event!r} (uuid={event.uuid}); storing NULL"
    )
    return None


def resolve_ip(event: RawEvent) -> str:
    properties = event.properties or {}
    return properties.get(IP_PROPERTY) or event.ip or ""


def transform_event(event: RawEvent) -> ParsedEvent:
    """
    Build the warehouse row for one event.

    For $autocapture events the $elements property is moved out of
    properties into the elements column. Never raises on odd input;
    missing values degrade to empty strings, "{}" or a NULL timestamp.
    """
    properties: Optional[Dict[str, Any]] = event.properties
    elements: Any = None

    if event.event == AUTOCAPTURE_EVENT and properties and ELEMENTS_PROPERTY in properties:
        properties = dict(properties)
        elements = properties.pop(ELEMENTS_PROPERTY)

    return ParsedEvent(
        uuid=event.uuid or "",
        event_name=event.event,
        properties=_to_json(properties),
        elements=_to_json(elements),
        set=_to_json(event.set),
        set_once=_to_json(event.set_once),
        distinct_id=event.distinct_id,
        team_id=event.team_id,
        ip=str(resolve_ip(event)),
        site_url=str(event.site_url or ""),
        timestamp=resolve_timestamp(event),
    )


def filter_ignored_events(
    events: Iterable[RawEvent],
    events_to_ignore: AbstractSet[str]
) -> List[RawEvent]:
    """Drop events whose name is in the ignore set, keeping order"""
    return [event for event in events if event.event not in events_to_ignore]
