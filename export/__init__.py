"""
Redshift export pipeline.

Modules:
    sanitizer: Strip unsafe characters from the configured table name
    schema_manager: CREATE TABLE IF NOT EXISTS at startup
    transformer: Map inbound events onto warehouse rows
    batch_builder: One multi-row parameterized INSERT per batch
    upload_manager: Execute the INSERT, retry with exponential backoff
    scheduler: APScheduler-backed delayed retries
    runner: Startup setup and the inbound export entry point

Architecture:
    events -> filter ignored -> transform -> build INSERT -> execute
                                                          └─ failure -> retry later (5s, 10s, ... 80s) -> drop

Usage:
    from export.runner import setup_export, create_exporter
    from export.scheduler import ExportScheduler

Example:
    context = await setup_export(settings)
    scheduler = ExportScheduler()
    exporter = create_exporter(context, scheduler)
    scheduler.start()

    status = await exporter.export_events(events)

Error Handling:
    ConfigurationError and SchemaBootstrapError abort startup. Delivery
    failures are logged and retried; after the retry ceiling the batch is
    dropped.
"""

__all__ = [
    "ExportContext",
    "EventExporter",
    "ExportScheduler",
    "UploadManager",
    "setup_export",
    "create_exporter",
    "sanitize_sql_identifier",
    "transform_event",
    "build_insert_statement",
]
