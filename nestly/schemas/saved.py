from pydantic import BaseModel
from typing import Optional
from nestly.schemas.listing import ListingResponse


class SavedListingResponse(BaseModel):
    id: str
    userId: str
    listingId: str
    createdAt: Optional[str] = None


class SavedListingWithListing(SavedListingResponse):
    listing: ListingResponse


class SavedStatusResponse(BaseModel):
    saved: bool
