from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, backref
from nestly.database.connection import Base


class Review(Base):
    __tablename__ = "Review"

    id = Column(String, primary_key=True)
    user_id = Column("userId", String, ForeignKey("User.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column("listingId", String, ForeignKey("Listing.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now())
    updated_at = Column("updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref=backref("reviews", passive_deletes=True))
    listing = relationship("Listing", backref=backref("reviews", passive_deletes=True))

    # One review per user per listing; a second review overwrites the first
    __table_args__ = (
        UniqueConstraint('userId', 'listingId', name='uq_review_user_listing'),
    )
