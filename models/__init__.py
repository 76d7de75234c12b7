"""
SQLAlchemy table definitions for the Redshift destination.

Modules:
    base: Shared enums (UploadStatus)
    events_table: Column layout of the exported events table and its DDL

Usage:
    from models.events_table import build_events_table, render_create_table
    from models.base import UploadStatus

Example:
    table = build_events_table("posthog_event")
    ddl = render_create_table(table)
    # CREATE TABLE IF NOT EXISTS public.posthog_event (uuid VARCHAR(200), ...)
"""

__all__ = [
    "UploadStatus",
    "build_events_table",
    "render_create_table",
]
