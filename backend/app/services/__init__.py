"""
Business logic services.
"""
from app.services.property_service import PropertyService
from app.services.upload_service import UploadService, UploadValidationError

__all__ = [
    "PropertyService",
    "UploadService",
    "UploadValidationError",
]
