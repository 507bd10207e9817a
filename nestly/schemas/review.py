from pydantic import BaseModel, Field
from typing import Optional, List
from nestly.schemas.user import OwnerSummary


class ReviewCreateRequest(BaseModel):
    listingId: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    id: str
    userId: str
    listingId: str
    rating: int
    comment: Optional[str] = None
    createdAt: str
    updatedAt: str
    user: Optional[OwnerSummary] = None


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    averageRating: float
    count: int
