from typing import Optional, Dict
from datetime import datetime, timezone
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload
from nestly.database.connection import AsyncSessionLocal
from nestly.models.review import Review
from nestly.services.listing_service import listing_exists
import uuid


def review_to_dict(review: Review) -> dict:
    user = review.user
    return {
        "id": review.id,
        "userId": review.user_id,
        "listingId": review.listing_id,
        "rating": review.rating,
        "comment": review.comment,
        "createdAt": review.created_at.isoformat() if review.created_at else "",
        "updatedAt": review.updated_at.isoformat() if review.updated_at else "",
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "avatar": user.avatar,
        } if user else None,
    }


async def upsert_review(user_id: str, listing_id: str, rating: int, comment: Optional[str] = None) -> Optional[Dict]:
    """Create or overwrite the caller's review of a listing (None if the listing is missing)"""
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")

    if not await listing_exists(listing_id):
        return None

    async with AsyncSessionLocal() as session:
        stmt = select(Review).where(
            Review.user_id == user_id,
            Review.listing_id == listing_id
        )
        result = await session.execute(stmt)
        review = result.scalar_one_or_none()

        now = datetime.now(timezone.utc)
        if review:
            review.rating = rating
            review.comment = comment or None
            review.updated_at = now
        else:
            review = Review(
                id=str(uuid.uuid4()),
                user_id=user_id,
                listing_id=listing_id,
                rating=rating,
                comment=comment or None,
                created_at=now,
                updated_at=now,
            )
            session.add(review)

        await session.commit()

        stmt = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.id == review.id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return review_to_dict(result.scalar_one())


async def get_reviews_for_listing(listing_id: str) -> Dict:
    """Reviews newest first with the average rating"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.listing_id == listing_id)
            .order_by(desc(Review.created_at))
        )
        result = await session.execute(stmt)
        reviews = [review_to_dict(r) for r in result.scalars().all()]

    count = len(reviews)
    average = round(sum(r["rating"] for r in reviews) / count, 2) if count else 0

    return {
        "reviews": reviews,
        "averageRating": average,
        "count": count,
    }
