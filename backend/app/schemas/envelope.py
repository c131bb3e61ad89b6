"""
Response envelope shared by every endpoint.

Shape: {"success": bool, "data": object | null, "message": str}
"""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class Envelope(BaseModel):
    """Uniform API response."""
    success: bool
    data: Optional[Any] = None
    message: str


def envelope_response(
    status_code: int,
    success: bool,
    message: str,
    data: Optional[Any] = None,
    headers: Optional[dict] = None
) -> JSONResponse:
    """Build a JSONResponse carrying the envelope."""
    body = Envelope(success=success, data=data, message=message)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers
    )


def success_response(data: Any, message: str, status_code: int = 200) -> JSONResponse:
    return envelope_response(status_code, True, message, data)


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return envelope_response(status_code, False, message, None, headers)


def format_validation_errors(errors: list) -> str:
    """
    Turn pydantic/FastAPI validation errors into one readable message.

    Example: "price: Input should be a valid integer"
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = error.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"
