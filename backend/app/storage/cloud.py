"""
Cloudinary storage backend.

Uploads are normalized on the Cloudinary side: converted to a single
compressed format, cropped to a 3:2 canvas and served with automatic
quality/format negotiation. The secure URL returned by Cloudinary is
used as the public URL.
"""
import asyncio
import importlib
import io
import logging
import secrets
from typing import Any, Dict, List

from app.storage.base import (
    StorageBackend,
    StorageConfig,
    StoredAsset,
    UploadRequest,
    timestamp_millis,
)

logger = logging.getLogger(__name__)

# Resize/crop to 1200x800 then let Cloudinary pick quality and delivery format
DEFAULT_TRANSFORMATION: List[Dict[str, Any]] = [
    {"width": 1200, "height": 800, "crop": "fill", "gravity": "auto"},
    {"quality": "auto", "fetch_format": "auto"},
]


def load_cloudinary_uploader(config: StorageConfig) -> Any:
    """
    Import and configure the Cloudinary SDK.

    Returns:
        The cloudinary.uploader module

    Raises:
        ImportError: If the cloudinary package is not installed
        TypeError: If the installed SDK does not expose a callable upload()
    """
    cloudinary = importlib.import_module("cloudinary")
    uploader = importlib.import_module("cloudinary.uploader")

    if not callable(getattr(uploader, "upload", None)):
        raise TypeError("cloudinary.uploader.upload is not callable")

    cloudinary.config(
        cloud_name=config.cloud_name,
        api_key=config.api_key,
        api_secret=config.api_secret,
        secure=True,
    )
    return uploader


class CloudinaryBackend(StorageBackend):
    """Uploads images to Cloudinary."""

    name = "cloudinary"

    def __init__(self, config: StorageConfig, uploader: Any):
        self._uploader = uploader
        self._prefix = config.filename_prefix
        self._folder = config.folder
        self._format = config.image_format
        logger.info(f"Cloudinary storage initialized for folder: {self._folder}")

    def generate_public_id(self) -> str:
        """
        Generate a public ID for a new asset.

        Pattern: {prefix}-{unixTimestampMillis}-{randomInt 0..999}
        """
        return f"{self._prefix}-{timestamp_millis()}-{secrets.randbelow(1000)}"

    def upload_options(self, public_id: str) -> Dict[str, Any]:
        """Options passed to cloudinary.uploader.upload for every asset."""
        return {
            "folder": self._folder,
            "format": self._format,
            "transformation": DEFAULT_TRANSFORMATION,
            "public_id": public_id,
            "resource_type": "image",
        }

    async def store(self, upload: UploadRequest) -> StoredAsset:
        public_id = self.generate_public_id()
        # The SDK is synchronous; keep the event loop free during the HTTP call
        result = await asyncio.to_thread(
            self._uploader.upload,
            io.BytesIO(upload.data),
            **self.upload_options(public_id)
        )
        secure_url = result.get("secure_url")
        if not secure_url:
            raise RuntimeError(f"Cloudinary returned no secure_url for {public_id}")

        stored_id = result.get("public_id", public_id)
        logger.debug(f"Uploaded {upload.filename} to Cloudinary as {stored_id}")
        return StoredAsset(
            identifier=stored_id,
            location=stored_id,
            backend=self.name,
            url=secure_url,
        )

    async def delete(self, asset: StoredAsset) -> None:
        await asyncio.to_thread(
            self._uploader.destroy,
            asset.location,
            resource_type="image"
        )
        logger.debug(f"Deleted {asset.location} from Cloudinary")

    def public_url(self, asset: StoredAsset, base_url: str) -> str:
        return asset.url
