"""
Health check endpoint.
Verifies database connectivity and reports the active storage backend.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from app.database import get_db
from app.schemas.envelope import envelope_response
from app.storage.base import StorageBackend
from app.storage.dependencies import get_storage_backend

router = APIRouter()


@router.get("")
async def health_check(
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage_backend)
):
    """
    Health check endpoint.
    Returns status of the database connection and the storage backend in use.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "storage": storage.name
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {str(e)}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        return envelope_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            False,
            "Service unhealthy",
            health_status
        )

    return envelope_response(status.HTTP_200_OK, True, "Service healthy", health_status)
