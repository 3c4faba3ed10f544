"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api import (
    auth_router,
    files_router,
    folders_router,
    photos_router,
    tags_router,
    uploads_router,
)
from .core.config import settings, ConfigurationError, Environment, INSECURE_JWT_SECRET
from .core.logging_config import setup_logging
from .database import engine, Base, get_db, DATABASE_URL, is_postgresql
from .exceptions import PhotoVaultException
from .middleware.exception_handler import (
    photovault_exception_handler,
    request_validation_handler,
    sqlalchemy_exception_handler,
)
from .middleware.request_context import RequestContextMiddleware

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:***@', url)


logger.info(f"Connecting to database: {_mask_url(DATABASE_URL)}")
try:
    Base.metadata.create_all(bind=engine)
except SQLAlchemyError as e:
    logger.critical(
        "Database initialisation failed.\n"
        f"  DATABASE_URL: {_mask_url(DATABASE_URL)}\n"
        f"  Error: {e}"
    )
    raise SystemExit(1) from e


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the PhotoVault API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        if settings.jwt_secret_key == INSECURE_JWT_SECRET:
            logger.warning(
                "SECURITY: JWT_SECRET_KEY is the default. "
                "Anyone can forge tokens. Generate a secure key: openssl rand -hex 32"
            )
        if not settings.s3_bucket_name:
            logger.warning("S3_BUCKET_NAME is empty. Uploads and blob deletes will fail.")

    yield


app = FastAPI(
    title="PhotoVault API",
    description=(
        "REST API for a personal photo library. Photos live in an S3-compatible "
        "bucket; metadata, folders and tags live in SQL.\n\n"
        "**Authentication:** every endpoint except `/signup`, `/signin`, `/` and "
        "`/health` requires a `Bearer` token in the `Authorization` header."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware stack (outermost first, CORS wraps request context).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(PhotoVaultException, photovault_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

db_type = "PostgreSQL" if is_postgresql() else "SQLite"
logger.info(
    "PhotoVault API started | env=%s | db=%s | bucket=%s | cors=%s",
    settings.environment.value,
    db_type,
    settings.s3_bucket_name or "<unset>",
    ",".join(settings.get_cors_origins()),
)

app.include_router(auth_router)
app.include_router(files_router)
app.include_router(folders_router)
app.include_router(photos_router)
app.include_router(tags_router)
app.include_router(uploads_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "PhotoVault API",
        "version": "1.0.0",
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check with database status, uptime and photo count.

    Never raises; a database failure is reported as ``degraded``.
    """
    db_status = "ok"
    photo_count = 0
    try:
        db.execute(text("SELECT 1"))
        photo_count = db.execute(text("SELECT COUNT(*) FROM photos")).scalar() or 0
    except SQLAlchemyError:
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": "1.0.0",
        "photo_count": photo_count,
    }
