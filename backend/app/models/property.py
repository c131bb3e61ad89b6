"""
Property model for listings shown on the browsing page.

The listing photo itself lives in the active storage backend;
only its public URL is stored here.
"""
from sqlalchemy import Column, String, Integer, Text, DateTime, Index
from sqlalchemy.sql import func

from app.models.base import Base, generate_uuid


class Property(Base):
    """
    Property listing model.

    Attributes:
        id: Unique identifier (UUID)
        name: Listing title
        description: Free-text description
        location: Town the property is in
        price: Nightly price in KES
        bedrooms: Number of bedrooms
        type: Apartment, Villa, House, Condo, Cottage...
        image_url: Public URL of the main photo
        owner_uid: Firebase uid of the user who submitted the listing
        created_at: When the listing was submitted
    """
    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(100), nullable=False, default="", index=True)
    price = Column(Integer, nullable=True)
    bedrooms = Column(Integer, nullable=False, default=1)
    type = Column(String(50), nullable=False, default="Apartment")
    image_url = Column(String(1024), nullable=False)
    owner_uid = Column(String(128), nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Indexes for browsing filters
    __table_args__ = (
        Index('ix_properties_type_bedrooms', 'type', 'bedrooms'),
        Index('ix_properties_price', 'price'),
    )

    def __repr__(self):
        return f"<Property(id={self.id}, name={self.name}, location={self.location})>"
