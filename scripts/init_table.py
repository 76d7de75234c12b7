import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, export, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.exceptions import ConfigurationError, SchemaBootstrapError
from core.logging import setup_logging
from export.sanitizer import sanitize_sql_identifier
from export.schema_manager import ensure_events_table

setup_logging()
logger = logging.getLogger(__name__)


async def init_table():
    settings.validate_export_config()
    table_name = sanitize_sql_identifier(settings.TABLE_NAME)
    logger.info(f"Connecting to Redshift at {settings.CLUSTER_HOST}...")
    await ensure_events_table(table_name, settings)


if __name__ == "__main__":
    try:
        asyncio.run(init_table())
    except (ConfigurationError, SchemaBootstrapError) as e:
        logger.error(str(e))
        sys.exit(1)
