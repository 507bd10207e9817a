"""
Listing Controller - public grid, detail and owner CRUD for listings
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Request, Query, status
from fastapi.responses import JSONResponse
from typing import Optional, List
from nestly.database.table_resolver import TableNotFoundError
from nestly.schemas.listing import (
    ListingResponse,
    NearbyListingResponse,
    ListingPageResponse,
    ListingCreateRequest,
    ListingUpdateRequest,
)
from nestly.services.listing_query import compile_listing_query
from nestly.services.listing_shaper import empty_page
from nestly.services.listing_service import (
    search_listings,
    create_listing,
    get_listing,
    update_listing,
    delete_listing,
    get_listings_by_owner,
    get_nearby_listings,
)
from nestly.utils.dependencies import get_current_user, is_admin
from nestly.utils.errors import error_response, table_not_found_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["Listings"])


@router.get("", response_model=ListingPageResponse, response_model_exclude_unset=True)
async def list_listings(request: Request):
    """
    Public listing grid

    Filters: status, type, category, minPrice, maxPrice, minArea, maxArea, rooms
    Ordering: sortBy (priceAsc, priceDesc, oldest, newest, relevance)
    Pagination: page, limit
    Invalid values are ignored. The envelope keeps its shape on errors.
    """
    query = compile_listing_query(dict(request.query_params))

    try:
        return await search_listings(query)
    except TableNotFoundError as e:
        logger.error(f"Listings unavailable: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=empty_page(query.page, query.page_size, "Database table not found"),
        )
    except Exception as e:
        logger.exception(f"Error fetching listings: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=empty_page(query.page, query.page_size, "Failed to fetch listings from database"),
        )


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing_endpoint(
    request: ListingCreateRequest,
    user: dict = Depends(get_current_user)
):
    """Create a listing; it waits in PENDING_REVIEW until an admin approves it"""
    try:
        listing_data = request.model_dump(exclude={"status"})
        return await create_listing(owner_id=user["id"], listing_data=listing_data)
    except TableNotFoundError:
        return table_not_found_response()
    except Exception as e:
        logger.exception(f"Error creating listing: {e}")
        return error_response("Failed to create listing", e)


@router.get("/nearby", response_model=List[NearbyListingResponse])
async def nearby_listings(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radiusKm: Optional[float] = Query(None, gt=0),
    limit: int = Query(50, ge=1, le=1000),
):
    """Published listings closest to a point, with distance in km"""
    try:
        return await get_nearby_listings(lat=lat, lng=lng, radius_km=radiusKm, limit=limit)
    except TableNotFoundError:
        return table_not_found_response()


@router.get("/user/{user_id}", response_model=List[ListingResponse])
async def get_user_listings(
    user_id: str,
    user: dict = Depends(get_current_user)
):
    """All listings of a user in every status (self or admin)"""
    if user["id"] != user_id and not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )

    try:
        return await get_listings_by_owner(user_id)
    except TableNotFoundError:
        return table_not_found_response()


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing_endpoint(listing_id: str):
    """Get listing by ID; counts a view"""
    try:
        listing = await get_listing(listing_id)
    except TableNotFoundError:
        return table_not_found_response()

    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )

    return listing


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing_endpoint(
    listing_id: str,
    request: ListingUpdateRequest,
    user: dict = Depends(get_current_user)
):
    """Update listing fields (owner or admin)"""
    try:
        updated = await update_listing(
            listing_id=listing_id,
            user=user,
            update_data=request.model_dump(exclude_unset=True)
        )
    except TableNotFoundError:
        return table_not_found_response()
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )

    return updated


@router.delete("/{listing_id}")
async def delete_listing_endpoint(
    listing_id: str,
    user: dict = Depends(get_current_user)
):
    """Delete a listing (owner or admin)"""
    try:
        deleted = await delete_listing(listing_id, user)
    except TableNotFoundError:
        return table_not_found_response()
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )

    return {"success": True}
