from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
from nestly.database.table_resolver import TableNotFoundError
from nestly.schemas.admin import AdminStatsResponse
from nestly.schemas.chat import ChatStatusResponse
from nestly.schemas.listing import ListingResponse
from nestly.schemas.user import UserResponse
from nestly.services.admin_stats_service import get_admin_stats
from nestly.services.chat_service import get_chat_status
from nestly.services.listing_service import get_listings_for_admin, set_listing_status
from nestly.services.user_service import get_users_for_admin, delete_user
from nestly.utils.dependencies import require_admin
from nestly.utils.errors import table_not_found_response

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/listings", response_model=List[ListingResponse])
async def get_all_listings(
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: dict = Depends(require_admin)
):
    """All listings, optionally of one status, newest first (Admin only)"""
    try:
        return await get_listings_for_admin(status_filter)
    except TableNotFoundError:
        return table_not_found_response()


async def _moderate(listing_id: str, new_status: str):
    try:
        listing = await set_listing_status(listing_id, new_status)
    except TableNotFoundError:
        return table_not_found_response()

    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )
    return listing


@router.post("/listings/{listing_id}/approve", response_model=ListingResponse)
async def approve_listing(listing_id: str, admin: dict = Depends(require_admin)):
    """Publish a listing (Admin only)"""
    return await _moderate(listing_id, "PUBLISHED")


@router.post("/listings/{listing_id}/reject", response_model=ListingResponse)
async def reject_listing(listing_id: str, admin: dict = Depends(require_admin)):
    """Archive a listing (Admin only)"""
    return await _moderate(listing_id, "ARCHIVED")


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin: dict = Depends(require_admin)):
    """Totals and this week's daily activity (Admin only)"""
    return await get_admin_stats()


@router.get("/users", response_model=List[UserResponse])
async def get_users(admin: dict = Depends(require_admin)):
    """All non-admin users, newest first (Admin only)"""
    return await get_users_for_admin()


@router.delete("/users/{user_id}")
async def delete_user_endpoint(user_id: str, admin: dict = Depends(require_admin)):
    """Delete a user (Admin only)"""
    deleted = await delete_user(user_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return {"success": True}


@router.get("/chat-status", response_model=ChatStatusResponse)
async def chat_status(admin: dict = Depends(require_admin)):
    """Whether the support chat tables exist (Admin only)"""
    return await get_chat_status()
