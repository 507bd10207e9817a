from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from nestly.schemas.user import OwnerSummary

ListingType = Literal["RENT", "SALE"]
ListingCategory = Literal["APARTMENT", "HOUSE", "COMMERCIAL"]
ListingStatus = Literal["DRAFT", "PENDING_REVIEW", "PUBLISHED", "ARCHIVED"]


class ListingResponse(BaseModel):
    id: str
    title: str
    description: str = ""
    type: str
    category: str
    price: float
    currency: str = "UAH"
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    area: Optional[float] = None
    rooms: Optional[int] = None
    images: List[str] = []
    amenities: List[str] = []
    availableFrom: Optional[str] = None
    availableTo: Optional[str] = None
    status: Optional[str] = None
    ownerId: Optional[str] = None
    views: int = 0
    createdAt: str
    updatedAt: str
    owner: OwnerSummary


class NearbyListingResponse(ListingResponse):
    distance: float  # km from the requested point


class ListingPageResponse(BaseModel):
    """Page envelope for the public grid; failures add success/error and keep the shape"""
    listings: List[ListingResponse]
    page: int
    pageSize: int
    total: int
    hasMore: bool
    success: Optional[bool] = None
    error: Optional[str] = None


class ListingCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ListingType
    category: ListingCategory
    price: float = Field(..., ge=0)
    currency: Optional[str] = "UAH"
    address: str = Field(..., min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    area: Optional[float] = None
    rooms: Optional[int] = None
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    availableFrom: Optional[datetime] = None
    availableTo: Optional[datetime] = None
    status: Optional[str] = None  # ignored: new listings always start in review


class ListingUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ListingType] = None
    category: Optional[ListingCategory] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    area: Optional[float] = None
    rooms: Optional[int] = None
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    availableFrom: Optional[datetime] = None
    availableTo: Optional[datetime] = None
    status: Optional[ListingStatus] = None
