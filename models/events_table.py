from sqlalchemy import Column, String, Integer, DateTime, MetaData, Table
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

# Redshift caps VARCHAR at 65535 bytes
LARGE_TEXT = 65535
SHORT_TEXT = 200


def build_events_table(table_name: str, metadata: MetaData = None) -> Table:
    """
    Describe the exported events table.

    The name is expected to be sanitized already. It is rendered unquoted so
    that a dotted name keeps its meaning in DDL and DML alike.
    """
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("uuid", String(SHORT_TEXT)),
        Column("event", String(SHORT_TEXT)),
        Column("properties", String(LARGE_TEXT)),
        Column("elements", String(LARGE_TEXT)),
        Column("set", String(LARGE_TEXT)),
        Column("set_once", String(LARGE_TEXT)),
        Column("timestamp", DateTime(timezone=True)),
        Column("team_id", Integer),
        Column("distinct_id", String(SHORT_TEXT)),
        Column("ip", String(SHORT_TEXT)),
        Column("site_url", String(SHORT_TEXT)),
        schema="public",
        quote=False,
        quote_schema=False,
    )


def render_create_table(table: Table) -> str:
    """Compile CREATE TABLE IF NOT EXISTS for the Postgres/Redshift dialect"""
    ddl = CreateTable(table, if_not_exists=True)
    return str(ddl.compile(dialect=postgresql.dialect())).strip() + ";"
