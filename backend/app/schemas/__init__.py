"""
Pydantic schemas for API request/response validation.
"""
from app.schemas.envelope import (
    Envelope,
    envelope_response,
    success_response,
    error_response,
    format_validation_errors,
)
from app.schemas.property import (
    PropertyFilters,
    PropertyCreate,
    PropertyResponse,
)

__all__ = [
    "Envelope",
    "envelope_response",
    "success_response",
    "error_response",
    "format_validation_errors",
    "PropertyFilters",
    "PropertyCreate",
    "PropertyResponse",
]
