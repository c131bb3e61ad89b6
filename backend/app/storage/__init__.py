"""
Image storage for listing photos.

Uploads go to Cloudinary when it is configured and available,
otherwise to local disk. The backend is picked once at startup.
"""
from app.storage.base import StorageBackend, StorageConfig, StoredAsset, UploadRequest
from app.storage.cloud import CloudinaryBackend
from app.storage.local import LocalDiskBackend
from app.storage.factory import create_storage_backend, get_storage

__all__ = [
    "StorageBackend",
    "StorageConfig",
    "StoredAsset",
    "UploadRequest",
    "CloudinaryBackend",
    "LocalDiskBackend",
    "create_storage_backend",
    "get_storage",
]
