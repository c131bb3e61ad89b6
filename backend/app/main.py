"""
FastAPI application entry point.
Sets up the API with lifespan events for database, storage and auth initialization.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import init_db
from app.api.router import api_router
from app.auth.firebase import initialize_firebase
from app.middleware.metrics_middleware import MetricsMiddleware
from app.schemas.envelope import error_response, format_validation_errors, success_response
from app.storage.base import StorageConfig
from app.storage.factory import create_storage_backend
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging, create tables, pick the storage
      backend and initialize Firebase Admin SDK
    - Shutdown: Nothing to clean up
    """
    configure_logging('pwanystay-api', settings.log_level)

    await init_db()

    # Storage backend is chosen exactly once per process
    app.state.storage = create_storage_backend(StorageConfig.from_settings(settings))

    # Skip if Firebase config not provided (for local dev without Firebase)
    if settings.firebase_project_id:
        try:
            initialize_firebase()
        except Exception as e:
            # In production, this should fail fast
            if settings.environment == "production":
                raise
            logger.warning(f"Firebase initialization failed: {e}")

    yield


# Create FastAPI app
app = FastAPI(
    title="Pwany Stay API",
    description="Backend API for the Pwany Stay property marketplace",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)


# ============================================================================
# Error handlers - every error leaves as a {success, data, message} envelope
# ============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        format_validation_errors(exc.errors())
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        extra={"event": "unhandled_error", "error": str(exc)},
        exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include API routes
app.include_router(api_router, prefix="/api")

# Local-disk uploads; the directory is created by the local backend
app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads"
)


@app.get("/")
async def root():
    """Root endpoint."""
    return success_response(
        {"version": "0.1.0", "environment": settings.environment},
        "Pwany Stay API"
    )


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
