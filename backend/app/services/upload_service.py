"""
Upload service: validation and storage of listing images.

Validation always happens before the storage backend is touched, so a
rejected upload never leaves a file on disk or an asset in the cloud.
Storage errors are not caught here; they propagate to the app's
generic error handler.
"""
import logging
import time
from typing import List, Optional, Sequence

from fastapi import Request, UploadFile

from app.config import settings
from app.storage.base import StorageBackend, StoredAsset, UploadRequest
from app.utils.logging import log_upload_discarded, log_upload_rejected, log_upload_stored
from app.utils.metrics import upload_bytes, uploads_total

logger = logging.getLogger(__name__)


class UploadValidationError(ValueError):
    """Upload rejected before reaching storage (client error)."""


def request_base_url(request: Request) -> str:
    """Return "{scheme}://{host}" for the current request."""
    host = request.headers.get("host") or request.url.netloc
    return f"{request.url.scheme}://{host}"


def _format_size(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):g} MB"


class UploadService:
    """
    Service for handling image uploads.

    Responsibilities:
    - Enforce size, count and type limits
    - Delegate bytes to the active storage backend
    - Resolve public URLs
    """

    @staticmethod
    async def read_upload(
        file: UploadFile,
        max_bytes: Optional[int] = None,
        require_image: bool = False
    ) -> UploadRequest:
        """
        Read and validate one uploaded file.

        Args:
            file: Multipart file from the request
            max_bytes: Size cap (defaults to settings.upload_max_bytes)
            require_image: Reject MIME types not starting with "image/"

        Returns:
            UploadRequest holding the file bytes

        Raises:
            UploadValidationError: If the file breaks a limit
        """
        if max_bytes is None:
            max_bytes = settings.upload_max_bytes

        content_type = file.content_type or "application/octet-stream"
        filename = file.filename or ""

        if require_image and not content_type.lower().startswith("image/"):
            log_upload_rejected(logger, reason="invalid_type", filename=filename, content_type=content_type)
            raise UploadValidationError("Only image files are allowed")

        too_large = f"File too large. Maximum size is {_format_size(max_bytes)}"

        # Declared size first, then the bytes actually received
        if file.size is not None and file.size > max_bytes:
            log_upload_rejected(logger, reason="too_large", filename=filename, size_bytes=file.size)
            raise UploadValidationError(too_large)

        data = await file.read(max_bytes + 1)
        if len(data) > max_bytes:
            log_upload_rejected(logger, reason="too_large", filename=filename)
            raise UploadValidationError(too_large)

        return UploadRequest(
            data=data,
            filename=filename,
            content_type=content_type,
            size=len(data),
        )

    @staticmethod
    async def read_uploads(
        files: Sequence[UploadFile],
        max_files: Optional[int] = None,
        require_image: bool = False
    ) -> List[UploadRequest]:
        """
        Read and validate a batch of files.

        Every file is validated before any is returned, so a single bad
        file rejects the whole batch.

        Raises:
            UploadValidationError: Empty batch, too many files, or a bad file
        """
        if max_files is None:
            max_files = settings.upload_max_files

        if not files:
            log_upload_rejected(logger, reason="no_files")
            raise UploadValidationError("No files uploaded")
        if len(files) > max_files:
            log_upload_rejected(logger, reason="too_many_files", count=len(files))
            raise UploadValidationError(f"Too many files. Maximum is {max_files}")

        return [
            await UploadService.read_upload(f, require_image=require_image)
            for f in files
        ]

    @staticmethod
    async def store(backend: StorageBackend, upload: UploadRequest) -> StoredAsset:
        """
        Persist one validated upload through the active backend.

        Raises:
            Exception: Whatever the backend raises (disk or cloud errors)
        """
        start_time = time.time()
        try:
            asset = await backend.store(upload)
        except Exception:
            uploads_total.labels(backend=backend.name, status="failed").inc()
            raise

        uploads_total.labels(backend=backend.name, status="stored").inc()
        upload_bytes.labels(backend=backend.name).observe(upload.size)
        log_upload_stored(
            logger,
            backend=backend.name,
            identifier=asset.identifier,
            size_bytes=upload.size,
            duration_ms=(time.time() - start_time) * 1000
        )
        return asset

    @staticmethod
    async def discard(backend: StorageBackend, asset: StoredAsset) -> None:
        """
        Remove an asset whose request failed after it was stored.

        Cleanup errors are logged and not raised, so the caller can
        re-raise the error that caused the rollback.
        """
        try:
            await backend.delete(asset)
        except Exception as e:
            logger.error(
                f"Failed to discard {asset.identifier}: {e}",
                extra={"event": "upload_discard_failed", "backend": backend.name}
            )
            return

        uploads_total.labels(backend=backend.name, status="discarded").inc()
        log_upload_discarded(logger, backend=backend.name, identifier=asset.identifier)

    @staticmethod
    async def store_and_resolve(
        backend: StorageBackend,
        uploads: List[UploadRequest],
        base_url: str
    ) -> List[str]:
        """
        Store uploads in order and return their public URLs in the same order.

        Fails fast: the first storage error aborts the batch. Files stored
        before the failure are left in place.
        """
        urls = []
        for upload in uploads:
            asset = await UploadService.store(backend, upload)
            urls.append(backend.public_url(asset, base_url))
        return urls
