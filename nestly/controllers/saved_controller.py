import logging
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
from nestly.database.table_resolver import TableNotFoundError
from nestly.schemas.saved import SavedListingResponse, SavedListingWithListing, SavedStatusResponse
from nestly.services.saved_service import get_saved_listings, is_saved, save_listing, unsave_listing
from nestly.utils.dependencies import get_current_user, get_current_user_optional, is_admin
from nestly.utils.errors import table_not_found_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/saved", tags=["Saved Listings"])


@router.get("", response_model=List[SavedListingWithListing])
async def list_saved(
    userId: Optional[str] = Query(None),
    user: dict = Depends(get_current_user)
):
    """Saved listings of a user (self or admin), newest first"""
    target_id = userId or user["id"]
    if target_id != user["id"] and not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )

    try:
        return await get_saved_listings(target_id)
    except TableNotFoundError:
        return table_not_found_response()


@router.get("/{listing_id}", response_model=SavedStatusResponse)
async def saved_status(
    listing_id: str,
    user: Optional[dict] = Depends(get_current_user_optional)
):
    """Whether the caller saved this listing; anonymous callers get false"""
    if not user:
        return SavedStatusResponse(saved=False)
    return SavedStatusResponse(saved=await is_saved(user["id"], listing_id))


@router.post("/{listing_id}", response_model=SavedListingResponse)
async def save(listing_id: str, user: dict = Depends(get_current_user)):
    """Save a listing; saving twice returns the existing bookmark"""
    try:
        saved = await save_listing(user["id"], listing_id)
    except TableNotFoundError:
        return table_not_found_response()

    if not saved:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )
    return saved


@router.delete("/{listing_id}")
async def unsave(listing_id: str, user: dict = Depends(get_current_user)):
    """Remove a saved listing"""
    await unsave_listing(user["id"], listing_id)
    return {"success": True}
