from fastapi import APIRouter, HTTPException, Depends, Query, status
from nestly.database.table_resolver import TableNotFoundError
from nestly.schemas.review import ReviewCreateRequest, ReviewResponse, ReviewListResponse
from nestly.services.review_service import upsert_review, get_reviews_for_listing
from nestly.utils.dependencies import get_current_user
from nestly.utils.errors import table_not_found_response

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResponse)
async def create_review(
    request: ReviewCreateRequest,
    user: dict = Depends(get_current_user)
):
    """Create or replace the caller's review of a listing"""
    try:
        review = await upsert_review(
            user_id=user["id"],
            listing_id=request.listingId,
            rating=request.rating,
            comment=request.comment
        )
    except TableNotFoundError:
        return table_not_found_response()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )
    return review


@router.get("", response_model=ReviewListResponse)
async def list_reviews(listingId: str = Query(...)):
    """Reviews of a listing with the average rating"""
    return await get_reviews_for_listing(listingId)
