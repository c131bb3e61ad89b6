"""
FastAPI dependency exposing the active storage backend.
"""
from fastapi import Request

from app.storage.base import StorageBackend
from app.storage.factory import get_storage


def get_storage_backend(request: Request) -> StorageBackend:
    """
    Return the backend selected at startup.

    Falls back to the lazily-created process singleton when the app
    lifespan has not run.
    """
    backend = getattr(request.app.state, "storage", None)
    if backend is None:
        backend = get_storage()
    return backend
