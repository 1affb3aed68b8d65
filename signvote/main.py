"""
SignVote Backend - Main Application
"""
import logging
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import signatures
from .core.auth import require_token
from .core.config import settings
from .core.database import engine
from .core.correlation import CorrelationIdMiddleware
from .core.errors import (
    SignatureNotFoundError,
    StorageFailure,
    http_exception_handler,
    not_found_handler,
    request_validation_handler,
    storage_failure_handler,
)
from .core.logging_config import setup_logging
from .db.models import Base

# Setup logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize Sentry if configured
if settings.SENTRY_DSN:
    try:
        import sentry_sdk
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENVIRONMENT,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        )
        logger.info("Sentry monitoring initialized", extra={"correlation_id": "startup"})
    except ImportError:
        logger.warning("Sentry SDK not installed, monitoring disabled", extra={"correlation_id": "startup"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown"""
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION_STRING} starting...", extra={"correlation_id": "startup"})
    logger.info(f"Environment: {settings.ENVIRONMENT}", extra={"correlation_id": "startup"})
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[-1]}", extra={"correlation_id": "startup"})
    logger.info(f"Auth Required: {settings.AUTH_REQUIRED}", extra={"correlation_id": "startup"})
    logger.info(f"Signature target: {settings.SIGNATURE_TARGET}", extra={"correlation_id": "startup"})

    if settings.AUTH_REQUIRED and not settings.API_TOKEN:
        logger.warning("AUTH_REQUIRED is set but API_TOKEN is empty; all protected requests will be rejected",
                       extra={"correlation_id": "startup"})

    try:
        if settings.AUTO_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified", extra={"correlation_id": "startup"})
    except Exception as e:
        logger.error(f"Database connection failed: {e}", extra={"correlation_id": "startup"})

    yield
    logger.info(f"{settings.API_TITLE} shutting down...", extra={"correlation_id": "shutdown"})


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION_STRING,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_REDOC else None,
)


def custom_openapi():
    """Custom OpenAPI schema with security definitions"""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.API_TITLE,
        version=settings.API_VERSION_STRING,
        description=settings.API_DESCRIPTION,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "description": "Shared API token",
        }
    }

    # Status endpoints stay open
    for path, operations in openapi_schema["paths"].items():
        if path in ("/health", "/version"):
            continue
        for operation in operations.values():
            if isinstance(operation, dict):
                operation["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_exception_handler(StorageFailure, storage_failure_handler)
app.add_exception_handler(SignatureNotFoundError, not_found_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials="*" not in settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["X-Correlation-Id"],
)

app.include_router(
    signatures.router,
    tags=["Signatures"],
    dependencies=[Depends(require_token)],
)


@app.get("/health", tags=["System"])
async def health_check():
    """
    Health check with DB verification

    Returns 200 if healthy, 503 if unhealthy
    """
    health = {
        "status": "healthy",
        "database": "connected",
        "environment": settings.ENVIRONMENT,
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        health["status"] = "unhealthy"
        health["database"] = "disconnected"
        health["error"] = str(e)
        logger.error(f"Health check: database unhealthy: {e}")
        return JSONResponse(content=health, status_code=503)

    return health


@app.get("/version", tags=["System"])
async def version():
    return {
        "application": settings.API_TITLE,
        "version": settings.API_VERSION_STRING,
        "environment": settings.ENVIRONMENT,
    }
