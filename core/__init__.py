"""
Core utilities and configuration for the Redshift export service.

Modules:
    config: Settings loaded from environment variables / .env, startup validation
    exceptions: Exception hierarchy (configuration, schema bootstrap, warehouse errors)
    logging: Logging configuration
    warehouse: One-statement-per-connection execute primitive for Redshift

Usage:
    from core.config import settings
    from core.warehouse import execute_query
    from core.exceptions import ConfigurationError, SchemaBootstrapError
    from core.logging import setup_logging

Example:
    setup_logging()
    settings.validate_export_config()

    result = await execute_query("SELECT 1", [], settings)
    if not result.ok:
        print(result.message)
"""

__all__ = [
    "settings",
    "setup_logging",
    "execute_query",
    "QueryResult",
    # Exceptions
    "ExportException",
    "RetryableError",
    "NonRetryableError",
    "WarehouseQueryError",
    "ConfigurationError",
    "SchemaBootstrapError",
    "BatchBuildError",
]
