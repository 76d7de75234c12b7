"""
Custom exceptions for the Redshift export pipeline with structured error context.

Exception Hierarchy:
    ExportException (base)
    ├── RetryableError
    │   └── WarehouseQueryError
    └── NonRetryableError
        ├── ConfigurationError
        ├── SchemaBootstrapError
        └── BatchBuildError

Only ConfigurationError and SchemaBootstrapError are meant to escape to the
caller; they abort startup. WarehouseQueryError is carried inside a
QueryResult and consumed by the upload retry logic.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ExportException(Exception):
    """
    Base exception for all export-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (batch id, table name, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Retry Strategy Markers
# ============================================================================

class RetryableError(ExportException):
    """
    Errors that the upload retry loop should absorb.

    Use this for transient errors like:
    - Connection refused or reset
    - Timeouts
    - Transient SQL errors during insert
    """
    pass


class NonRetryableError(ExportException):
    """
    Errors that retrying cannot fix.

    Use this for permanent errors like:
    - Missing or malformed configuration
    - Table bootstrap failures at startup
    - Programming errors such as an empty batch
    """
    pass


# ============================================================================
# Specific Errors
# ============================================================================

class WarehouseQueryError(RetryableError):
    """
    A statement failed against the warehouse.

    Context should include:
        - operation: CONNECT, INSERT, CREATE TABLE, ...
        - host: Cluster host the statement was sent to
    """
    pass


class ConfigurationError(NonRetryableError):
    """
    Required configuration is missing or malformed.

    Context should include:
        - errors: Every validation problem found
    """
    pass


class SchemaBootstrapError(NonRetryableError):
    """
    The destination table could not be ensured at startup.

    Context should include:
        - table_name: Sanitized destination table
    """
    pass


class BatchBuildError(NonRetryableError):
    """An insert statement was requested for an empty batch."""
    pass
