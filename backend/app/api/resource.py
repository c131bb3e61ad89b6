"""
Property listing endpoints consumed by the browsing page and the
listing-submission form.

GET requests are public. Submitting a listing requires a Firebase
ID token in the Authorization header.
"""
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import CurrentUser, get_current_user
from app.database import get_db
from app.schemas.envelope import format_validation_errors, success_response
from app.schemas.property import PropertyCreate, PropertyFilters, PropertyResponse
from app.services.property_service import PropertyService
from app.services.upload_service import UploadService, UploadValidationError, request_base_url
from app.storage.base import StorageBackend
from app.storage.dependencies import get_storage_backend
from app.utils.logging import log_property_created
from app.utils.metrics import properties_created_total

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_properties(
    search: Optional[str] = None,
    town: Optional[str] = None,
    type: Optional[str] = None,
    bedrooms: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    db: AsyncSession = Depends(get_db)
):
    """
    List properties for the browsing page.

    Empty, "Any" and "All" filter values are ignored.
    """
    try:
        filters = PropertyFilters(
            search=search,
            town=town,
            type=type,
            bedrooms=bedrooms,
            minPrice=min_price,
            maxPrice=max_price,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_validation_errors(e.errors())
        )

    properties = await PropertyService.list_properties(db, filters)
    data = [PropertyResponse.model_validate(p) for p in properties]

    return success_response(data, "Properties retrieved")


@router.get("/{property_id}")
async def get_property(
    property_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a single property."""
    prop = await PropertyService.get_property(db, property_id)
    if not prop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )
    return success_response(PropertyResponse.model_validate(prop), "Property retrieved")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_property(
    request: Request,
    name: Optional[str] = Form(None),
    description: str = Form(""),
    location: str = Form(""),
    price: Optional[str] = Form(None),
    bedrooms: str = Form("1"),
    type: str = Form("Apartment"),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage_backend),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Submit a new listing with its main photo.

    The photo must be an image/* file no larger than 5 MB. It is
    stored through the active backend before the listing is saved.
    Requires valid Firebase ID token.
    """
    start_time = time.time()

    if not name or not name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Property title is required"
        )

    try:
        data = PropertyCreate(
            name=name,
            description=description,
            location=location,
            price=price,
            bedrooms=bedrooms,
            type=type,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_validation_errors(e.errors())
        )

    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Property image is required"
        )

    try:
        upload = await UploadService.read_upload(image, require_image=True)
    except UploadValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    asset = await UploadService.store(storage, upload)
    image_url = storage.public_url(asset, request_base_url(request))

    try:
        prop = await PropertyService.create_property(
            db,
            data=data,
            image_url=image_url,
            owner_uid=current_user.uid
        )
    except Exception:
        # No listing, no photo
        await UploadService.discard(storage, asset)
        raise

    properties_created_total.inc()
    log_property_created(
        logger,
        property_id=prop.id,
        user_id=current_user.uid,
        duration_ms=(time.time() - start_time) * 1000,
        backend=storage.name
    )

    return success_response(
        PropertyResponse.model_validate(prop),
        "Listing submitted successfully",
        status_code=status.HTTP_201_CREATED
    )
