from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, Text, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, backref
from nestly.database.connection import Base


class Listing(Base):
    __tablename__ = "Listing"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False, index=True)  # 'RENT' | 'SALE'
    category = Column(String, nullable=False, index=True)  # 'APARTMENT' | 'HOUSE' | 'COMMERCIAL'
    price = Column(Float, nullable=False, index=True)
    currency = Column(String, nullable=False, default="UAH")
    address = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    area = Column(Float, nullable=True)
    rooms = Column(Integer, nullable=True)
    images = Column(JSON, nullable=True, default=list)
    amenities = Column(JSON, nullable=True, default=list)
    available_from = Column("availableFrom", DateTime(timezone=True), nullable=True)
    available_to = Column("availableTo", DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=False, default="PENDING_REVIEW", index=True)
    owner_id = Column("ownerId", String, ForeignKey("User.id", ondelete="CASCADE"), nullable=False, index=True)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column("updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", backref=backref("listings", passive_deletes=True))

    # Composite indexes for the public grid filters
    __table_args__ = (
        Index('idx_listing_status_created', 'status', 'createdAt'),
        Index('idx_listing_status_price', 'status', 'price'),
    )
