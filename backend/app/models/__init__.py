"""
Database models package.
"""
from app.models.base import Base
from app.models.property import Property

__all__ = [
    "Base",
    "Property",
]
