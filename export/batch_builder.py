"""
Build one multi-row parameterized INSERT for a batch of rows
"""

from typing import Any, List, NamedTuple, Sequence

from core.exceptions import BatchBuildError
from schemas.events import ParsedEvent

INSERT_COLUMNS = (
    "uuid",
    "event",
    "properties",
    "elements",
    "set",
    "set_once",
    "distinct_id",
    "team_id",
    "ip",
    "site_url",
    "timestamp",
)


class InsertStatement(NamedTuple):
    query: str
    values: List[Any]


def row_values(event: ParsedEvent) -> List[Any]:
    """Values of one row, in INSERT_COLUMNS order"""
    return [
        event.uuid,
        event.event_name,
        event.properties,
        event.elements,
        event.set,
        event.set_once,
        event.distinct_id,
        event.team_id,
        event.ip,
        event.site_url,
        event.timestamp,
    ]


def placeholder_group(row_index: int, width: int = len(INSERT_COLUMNS)) -> str:
    """
    Numbered placeholders for one row.

    Row 0 -> ($1, ..., $11), row 1 -> ($12, ..., $22), ...
    """
    start = width * row_index + 1
    return "(" + ", ".join(f"${n}" for n in range(start, start + width)) + ")"


def build_insert_statement(table_name: str, batch: Sequence[ParsedEvent]) -> InsertStatement:
    """
    Render the INSERT for a whole batch in a single round trip.

    Every value is bound positionally; nothing from the rows is
    interpolated into the SQL text.

    Raises:
        BatchBuildError: If the batch is empty
    """
    if not batch:
        raise BatchBuildError(
            "Cannot build an INSERT for an empty batch",
            context={"table_name": table_name}
        )

    values: List[Any] = []
    groups: List[str] = []

    for i, event in enumerate(batch):
        groups.append(placeholder_group(i))
        values.extend(row_values(event))

    query = (
        f"INSERT INTO {table_name} ({', '.join(INSERT_COLUMNS)})\n"
        f"VALUES {', '.join(groups)}"
    )
    return InsertStatement(query=query, values=values)
