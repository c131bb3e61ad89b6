"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- backend
- property_id
- user_id
- duration_ms

Usage:
    from app.utils.logging import configure_logging, log_upload_stored

    configure_logging('pwanystay-api', 'INFO')
    log_upload_stored(logger, backend='local', identifier='prop-1-abc.png', size_bytes=10)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    backend: Optional[str] = None,
    user_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        backend: Optional storage backend name
        user_id: Optional user ID
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if backend:
        extra["backend"] = backend
    if user_id:
        extra["user_id"] = user_id
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Storage selection events

def log_storage_selected(logger: logging.Logger, backend: str, **kwargs):
    """Log which storage backend will serve uploads."""
    extra = _build_log_extra(event="storage_selected", backend=backend, **kwargs)
    logger.info(f"Storage backend selected: {backend}", extra=extra)


def log_storage_fallback(logger: logging.Logger, reason: str, **kwargs):
    """
    Log a fallback to local disk storage.

    Non-fatal: the app keeps running with the local backend.
    """
    extra = _build_log_extra(
        event="storage_fallback",
        backend="local",
        reason=reason,
        **kwargs
    )
    logger.warning(f"Using local storage: {reason}", extra=extra)


# Upload events

def log_upload_stored(
    logger: logging.Logger,
    backend: str,
    identifier: str,
    size_bytes: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a successfully stored upload.

    Args:
        logger: Logger instance
        backend: Backend that stored the file (required)
        identifier: Generated filename or public ID (required)
        size_bytes: Size of the stored file (required)
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_stored",
        backend=backend,
        duration_ms=duration_ms,
        identifier=identifier,
        size_bytes=size_bytes,
        **kwargs
    )
    logger.info(f"Upload stored: {identifier}", extra=extra)


def log_upload_rejected(
    logger: logging.Logger,
    reason: str,
    filename: Optional[str] = None,
    **kwargs
):
    """Log an upload rejected by validation."""
    extra = _build_log_extra(event="upload_rejected", reason=reason, **kwargs)
    if filename:
        # "filename" is reserved on LogRecord
        extra["upload_filename"] = filename

    logger.info(f"Upload rejected: {reason}", extra=extra)


def log_upload_discarded(logger: logging.Logger, backend: str, identifier: str, **kwargs):
    """Log a stored upload removed because its request failed."""
    extra = _build_log_extra(
        event="upload_discarded",
        backend=backend,
        identifier=identifier,
        **kwargs
    )
    logger.warning(f"Upload discarded: {identifier}", extra=extra)


# Listing events

def log_property_created(
    logger: logging.Logger,
    property_id: str,
    user_id: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log listing creation event.

    Args:
        logger: Logger instance
        property_id: Property ID (required)
        user_id: Owner's Firebase uid (required)
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="property_created",
        user_id=user_id,
        duration_ms=duration_ms,
        property_id=property_id,
        **kwargs
    )
    logger.info(f"Property created: {property_id}", extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
