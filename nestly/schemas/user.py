from pydantic import BaseModel, Field
from typing import Optional


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    role: str
    ownerVerified: bool = False
    createdAt: str
    updatedAt: str

    class Config:
        from_attributes = True


class OwnerSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None


class RoleUpdateRequest(BaseModel):
    role: str


class RoleUpdateResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str


class CreditsResponse(BaseModel):
    credits: float
    userId: str
    email: str
    name: Optional[str] = None


class CreditsUpdateRequest(BaseModel):
    credits: float = Field(..., ge=0)
    action: str = "set"  # 'set', 'add' or 'subtract'


class CreditsUpdateResponse(BaseModel):
    success: bool
    userId: str
    email: str
    name: Optional[str] = None
    previousCredits: float
    newCredits: float
    action: str
