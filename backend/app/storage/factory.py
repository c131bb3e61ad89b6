"""
Storage backend factory.
Selects the backend that serves uploads for the lifetime of the process.
"""
import logging
from typing import Any, Callable, Optional

from app.config import settings
from app.storage.base import StorageBackend, StorageConfig
from app.storage.cloud import CloudinaryBackend, load_cloudinary_uploader
from app.storage.local import LocalDiskBackend
from app.utils.logging import log_storage_fallback, log_storage_selected

logger = logging.getLogger(__name__)


def create_storage_backend(
    config: StorageConfig,
    loader: Callable[[StorageConfig], Any] = load_cloudinary_uploader
) -> StorageBackend:
    """
    Factory function to pick the storage backend.

    Selection:
    - All Cloudinary credentials set and the SDK loads → CloudinaryBackend
    - Credentials missing → LocalDiskBackend
    - SDK missing or broken → LocalDiskBackend (warning logged)

    Never raises for configuration problems; startup must not fail
    because the cloud provider is unavailable.

    Args:
        config: Storage configuration
        loader: Callable returning a configured uploader (replaceable in tests)

    Returns:
        StorageBackend instance
    """
    if not config.has_cloud_credentials:
        log_storage_fallback(
            logger,
            reason="Cloudinary not configured. "
                   "Set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET."
        )
        backend = LocalDiskBackend(config)
        log_storage_selected(logger, backend=backend.name)
        return backend

    try:
        uploader = loader(config)
        backend = CloudinaryBackend(config, uploader)
    except Exception as e:
        log_storage_fallback(logger, reason=f"Cloudinary not available: {e}")
        backend = LocalDiskBackend(config)

    log_storage_selected(logger, backend=backend.name)
    return backend


# Singleton instance
_storage_backend: Optional[StorageBackend] = None


def get_storage() -> StorageBackend:
    """
    Get the process-wide storage backend, creating it on first use.

    Returns:
        StorageBackend selected from the global settings
    """
    global _storage_backend
    if _storage_backend is None:
        _storage_backend = create_storage_backend(StorageConfig.from_settings(settings))
    return _storage_backend
