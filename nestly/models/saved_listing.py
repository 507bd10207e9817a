from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, backref
from nestly.database.connection import Base


class SavedListing(Base):
    __tablename__ = "SavedListing"

    id = Column(String, primary_key=True)
    user_id = Column("userId", String, ForeignKey("User.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column("listingId", String, ForeignKey("Listing.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref=backref("saved_listings", passive_deletes=True))
    listing = relationship("Listing")

    __table_args__ = (
        UniqueConstraint('userId', 'listingId', name='uq_saved_user_listing'),
    )
