from pydantic import BaseModel, Field
from typing import Optional, List, Literal


class CheckoutSessionRequest(BaseModel):
    listingId: str
    listingTitle: str
    amount: float = Field(..., gt=0)
    currency: str = "UAH"
    billingCycle: Literal["month", "3months", "year"] = "month"
    customerEmail: Optional[str] = None
    customerName: Optional[str] = None
    successUrl: Optional[str] = None
    cancelUrl: Optional[str] = None


class CheckoutSessionResponse(BaseModel):
    sessionId: str
    url: Optional[str] = None


class UploadResponse(BaseModel):
    urls: List[str]
