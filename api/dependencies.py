"""
Request dependencies backed by state created at startup
"""

from fastapi import Request
from export.runner import EventExporter, ExportContext
from export.scheduler import ExportScheduler


def get_exporter(request: Request) -> EventExporter:
    return request.app.state.exporter


def get_context(request: Request) -> ExportContext:
    return request.app.state.context


def get_scheduler(request: Request) -> ExportScheduler:
    return request.app.state.scheduler
