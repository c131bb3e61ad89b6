"""
Property service for listing queries and creation.
"""
import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.property import Property
from app.schemas.property import PropertyCreate, PropertyFilters

logger = logging.getLogger(__name__)


class PropertyService:
    """Service for property listing business logic."""

    @staticmethod
    async def list_properties(
        db: AsyncSession,
        filters: PropertyFilters
    ) -> List[Property]:
        """
        List properties matching the browsing filters, newest first.

        Args:
            db: Database session
            filters: Normalized filters (absent values are ignored)
        """
        query = select(Property)

        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    Property.name.ilike(pattern),
                    Property.description.ilike(pattern),
                    Property.location.ilike(pattern),
                )
            )
        if filters.town:
            query = query.where(Property.location == filters.town)
        if filters.type:
            query = query.where(Property.type == filters.type)

        bedrooms = filters.bedrooms_bound()
        if bedrooms is not None:
            count, at_least = bedrooms
            if at_least:
                query = query.where(Property.bedrooms >= count)
            else:
                query = query.where(Property.bedrooms == count)

        if filters.min_price is not None:
            query = query.where(Property.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Property.price <= filters.max_price)

        result = await db.execute(
            query.order_by(Property.created_at.desc(), Property.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_property(db: AsyncSession, property_id: str) -> Optional[Property]:
        """Get a property by ID, or None."""
        result = await db.execute(
            select(Property).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_property(
        db: AsyncSession,
        data: PropertyCreate,
        image_url: str,
        owner_uid: str
    ) -> Property:
        """
        Create a listing.

        Args:
            db: Database session
            data: Validated form fields
            image_url: Public URL of the already-stored photo
            owner_uid: Firebase uid of the submitting user
        """
        prop = Property(
            name=data.name,
            description=data.description,
            location=data.location,
            price=data.price,
            bedrooms=data.bedrooms,
            type=data.type,
            image_url=image_url,
            owner_uid=owner_uid,
        )
        db.add(prop)
        await db.commit()
        await db.refresh(prop)
        return prop
