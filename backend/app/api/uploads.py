"""
Image upload endpoints.

1. POST /upload - Store one image (field "image")
2. POST /upload/multi - Store up to 12 images (field "images")

The active storage backend (Cloudinary or local disk) is chosen at
startup; these endpoints never know which one served the request.
Local files are served back under /uploads/{filename}.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from app.schemas.envelope import success_response
from app.services.upload_service import UploadService, UploadValidationError, request_base_url
from app.storage.base import StorageBackend
from app.storage.dependencies import get_storage_backend

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_single(
    request: Request,
    image: Optional[UploadFile] = File(None),
    storage: StorageBackend = Depends(get_storage_backend)
):
    """
    Upload a single image.

    Returns 201 with data.url on success, 400 when no file was sent
    or the file exceeds the size limit.
    """
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    try:
        upload = await UploadService.read_upload(image)
    except UploadValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    urls = await UploadService.store_and_resolve(storage, [upload], request_base_url(request))

    return success_response(
        {"url": urls[0]},
        "File uploaded",
        status_code=status.HTTP_201_CREATED
    )


@router.post("/multi", status_code=status.HTTP_201_CREATED)
async def upload_multiple(
    request: Request,
    images: Optional[List[UploadFile]] = File(None),
    storage: StorageBackend = Depends(get_storage_backend)
):
    """
    Upload up to 12 images at once.

    URLs are returned in the order the files were received. All files
    are validated before any is stored; a storage failure part way
    through fails the whole request.
    """
    try:
        uploads = await UploadService.read_uploads(images or [])
    except UploadValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    urls = await UploadService.store_and_resolve(storage, uploads, request_base_url(request))

    return success_response(
        {"urls": urls},
        "Files uploaded",
        status_code=status.HTTP_201_CREATED
    )
