"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from api.routes import health, events
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.logging import setup_logging
from export.runner import setup_export, create_exporter
from export.scheduler import ExportScheduler
import logging

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate config and ensure the table; refuse to start otherwise"""
    logger.info("Starting Redshift Event Export API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Cluster: {settings.CLUSTER_HOST or 'not configured'}")
    logger.info(
        f"Host buffering thresholds: {settings.UPLOAD_SECONDS}s / {settings.UPLOAD_MEGABYTES}MB"
    )

    context = await setup_export(settings)

    scheduler = ExportScheduler()
    app.state.context = context
    app.state.scheduler = scheduler
    app.state.exporter = create_exporter(context, scheduler)

    scheduler.start()

    yield

    logger.info("Shutting down Redshift Event Export API")
    pending = len(scheduler.pending_jobs())
    if pending:
        logger.warning(f"{pending} scheduled retries will not run")
    scheduler.stop()


app = FastAPI(
    title="Redshift Event Export API",
    description="Accepts analytics event batches and delivers them into Redshift",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(events.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Redshift Event Export API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "export": "/events/export"
        }
    }
