"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List, FrozenSet
from core.exceptions import ConfigurationError


REDSHIFT_HOST_SUFFIX = "redshift.amazonaws.com"

REQUIRED_CONFIG_OPTIONS = (
    "CLUSTER_HOST",
    "CLUSTER_PORT",
    "DB_NAME",
    "DB_USERNAME",
    "DB_PASSWORD",
)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Redshift cluster
    CLUSTER_HOST: Optional[str] = None
    CLUSTER_PORT: Optional[str] = None
    DB_NAME: Optional[str] = None
    DB_USERNAME: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    CONNECT_TIMEOUT_SECONDS: float = 10.0

    # Export
    TABLE_NAME: str = "posthog_event"
    EVENTS_TO_IGNORE: str = ""
    UPLOAD_MAX_RETRIES: int = 5
    RETRY_BASE_DELAY_MS: int = 5000

    # Host-side buffering thresholds, reported but not acted on here
    UPLOAD_SECONDS: int = 30
    UPLOAD_MEGABYTES: int = 1

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def validate_export_config(self) -> None:
        """
        Check the options the exporter cannot run without.

        Raises:
            ConfigurationError: listing every problem found
        """
        errors: List[str] = []

        for option in REQUIRED_CONFIG_OPTIONS:
            if not getattr(self, option):
                errors.append(f"Required config option {option} is missing!")

        if self.CLUSTER_HOST and not self.CLUSTER_HOST.endswith(REDSHIFT_HOST_SUFFIX):
            errors.append("Cluster host must be a valid AWS Redshift host")

        if self.CLUSTER_PORT and not str(self.CLUSTER_PORT).strip().isdigit():
            errors.append(f"Cluster port must be an integer, got {self.CLUSTER_PORT!r}")

        if errors:
            raise ConfigurationError(
                "; ".join(errors),
                context={"errors": errors}
            )

    @property
    def cluster_port(self) -> int:
        return int(str(self.CLUSTER_PORT).strip())

    def events_to_ignore(self) -> FrozenSet[str]:
        """Parse the comma-separated ignore list"""
        if not self.EVENTS_TO_IGNORE:
            return frozenset()
        return frozenset(
            event.strip() for event in self.EVENTS_TO_IGNORE.split(",") if event.strip()
        )


settings = Settings()
