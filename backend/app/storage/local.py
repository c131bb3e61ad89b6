"""
Local filesystem storage backend.

Used whenever Cloudinary is not configured or cannot be loaded.
Files are written to the upload directory and served by the app
under /uploads/{filename}.
"""
import asyncio
import logging
import os
from pathlib import Path

from app.storage.base import (
    StorageBackend,
    StorageConfig,
    StoredAsset,
    UploadRequest,
    random_base36,
    timestamp_millis,
)

logger = logging.getLogger(__name__)

# Attempts before giving up on finding a free filename
MAX_NAME_ATTEMPTS = 5


class LocalDiskBackend(StorageBackend):
    """Writes uploads to a directory on local disk."""

    name = "local"

    def __init__(self, config: StorageConfig):
        self._prefix = config.filename_prefix
        self._upload_dir = Path(config.upload_dir).resolve()
        # Idempotent, safe when the directory already exists
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local storage initialized at: {self._upload_dir}")

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def generate_filename(self, original_filename: str) -> str:
        """
        Generate a unique filename for an upload.

        Pattern: {prefix}-{unixTimestampMillis}-{base36 suffix}{ext}
        """
        ext = os.path.splitext(original_filename or "")[1]
        return f"{self._prefix}-{timestamp_millis()}-{random_base36()}{ext}"

    def _write(self, upload: UploadRequest) -> Path:
        for _ in range(MAX_NAME_ATTEMPTS):
            path = self._upload_dir / self.generate_filename(upload.filename)
            try:
                # Exclusive create: never overwrite another upload
                with open(path, "xb") as f:
                    f.write(upload.data)
                return path
            except FileExistsError:
                logger.debug(f"Filename collision on {path.name}, retrying")
        raise FileExistsError(f"Could not allocate a unique filename in {self._upload_dir}")

    async def store(self, upload: UploadRequest) -> StoredAsset:
        path = await asyncio.to_thread(self._write, upload)
        logger.debug(f"Stored {upload.filename} as {path}")
        return StoredAsset(
            identifier=path.name,
            location=str(path),
            backend=self.name,
        )

    async def delete(self, asset: StoredAsset) -> None:
        path = Path(asset.location)
        # Missing file is fine, the asset is gone either way
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.debug(f"Deleted {path}")

    def public_url(self, asset: StoredAsset, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/uploads/{asset.identifier}"
