"""
Base types for image storage backends.

Every backend implements the same interface so the upload flow can persist
a file and obtain its public URL without knowing where the bytes went.
"""
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.config import Settings

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class UploadRequest:
    """One uploaded file, held in memory for the duration of a request."""
    data: bytes
    filename: str
    content_type: str
    size: int


@dataclass(frozen=True)
class StoredAsset:
    """
    Result of a successful store.

    Attributes:
        identifier: Generated filename (local) or public ID (cloud)
        location: Absolute path on disk or cloud public ID
        url: Public URL when the backend knows it (cloud only)
        backend: Name of the backend that stored the file
    """
    identifier: str
    location: str
    backend: str
    url: Optional[str] = None


class StorageConfig(BaseModel):
    """
    Storage strategy configuration.

    Built once from settings at startup and never mutated.
    """
    model_config = ConfigDict(frozen=True)

    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    folder: str = "pwanystay_properties"
    image_format: str = "webp"
    upload_dir: str = "public/uploads"
    filename_prefix: str = "prop"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            image_format=settings.upload_image_format,
            upload_dir=settings.upload_dir,
            filename_prefix=settings.upload_filename_prefix,
        )

    @property
    def has_cloud_credentials(self) -> bool:
        """True only when all three cloud credentials are present and non-empty."""
        return all([self.cloud_name, self.api_key, self.api_secret])


def timestamp_millis() -> int:
    """Current unix time in milliseconds."""
    return int(time.time() * 1000)


def random_base36(length: int = 6) -> str:
    """Random lower-case base36 string of the given length."""
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All backends must implement:
    - store(): Persist bytes and return a StoredAsset
    - delete(): Remove a previously stored asset
    - public_url(): Resolve a StoredAsset into a URL clients can fetch
    """

    name: str = "base"

    @abstractmethod
    async def store(self, upload: UploadRequest) -> StoredAsset:
        """
        Persist one uploaded file.

        Args:
            upload: The validated upload

        Returns:
            StoredAsset describing where the file lives

        Raises:
            Exception: Any storage error is propagated to the caller
        """
        pass

    @abstractmethod
    async def delete(self, asset: StoredAsset) -> None:
        """
        Remove an asset returned by store().

        Used to undo a store when the rest of the request fails.
        """
        pass

    @abstractmethod
    def public_url(self, asset: StoredAsset, base_url: str) -> str:
        """
        Build the public URL for a stored asset.

        Args:
            asset: Asset returned by store()
            base_url: "{scheme}://{host}" of the current request
        """
        pass
