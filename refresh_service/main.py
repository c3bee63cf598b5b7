"""FastAPI application entry point."""

import logging
import os

import sqlalchemy
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from refresh_service.config import settings
from refresh_service.exceptions import ConfigurationError, DataSourceError
from refresh_service.routes import monitor, refresh

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Report Refresh Scheduler",
    description="Triggers weekly intelligence report refreshes for onboarded users",
    version="0.1.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(refresh.router)
app.include_router(monitor.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Service misconfigured: {exc}")
    return PlainTextResponse("Service misconfigured", status_code=500)


@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError):
    logger.error(f"Data source unavailable, no workflows triggered: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    """Wait for the database and apply migrations."""
    logger.info("Starting application...")

    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set, skipping database startup checks")
        return

    from refresh_service.database import get_engine, wait_for_database

    try:
        wait_for_database()

        tables = sqlalchemy.inspect(get_engine()).get_table_names()
        if "workflow_runs" in tables and "onboarding_profiles" in tables:
            logger.info("Database tables already exist, skipping migrations")
        else:
            logger.info("Running database migrations...")
            from alembic import command
            from alembic.config import Config

            alembic_cfg = Config(os.path.join(os.path.dirname(os.path.dirname(__file__)), "alembic.ini"))
            command.upgrade(alembic_cfg, "head")
            logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Startup database check/migration error: {e}")
        logger.info("Continuing startup - assuming database is ready")


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Report Refresh Scheduler",
        "version": "0.1.0",
        "status": "running",
    }
