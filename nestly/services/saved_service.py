"""
Saved Listing Service - per-user bookmarks of listings
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List
from sqlalchemy import select, insert, delete, desc, table, column, DateTime
from sqlalchemy.exc import IntegrityError
from nestly.database.connection import AsyncSessionLocal
from nestly.database.table_resolver import resolve_table, try_resolve_table, SAVED_LISTING, LISTING
from nestly.services.listing_service import listing_table, listing_exists
from nestly.services.owner_service import attach_owners

logger = logging.getLogger(__name__)


def saved_table(name: str):
    return table(
        name,
        column("id"),
        column("userId"),
        column("listingId"),
        column("createdAt", DateTime(timezone=True)),
    )


def _saved_to_dict(row) -> dict:
    created_at = row.get("createdAt")
    return {
        "id": row["id"],
        "userId": row["userId"],
        "listingId": row["listingId"],
        "createdAt": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
    }


async def _find_saved(session, saved, user_id: str, listing_id: str) -> Optional[dict]:
    stmt = select(saved).where(saved.c.userId == user_id, saved.c.listingId == listing_id)
    result = await session.execute(stmt)
    row = result.mappings().first()
    return _saved_to_dict(row) if row else None


async def is_saved(user_id: str, listing_id: str) -> bool:
    table_name = await try_resolve_table(SAVED_LISTING)
    if not table_name:
        return False
    async with AsyncSessionLocal() as session:
        return await _find_saved(session, saved_table(table_name), user_id, listing_id) is not None


async def save_listing(user_id: str, listing_id: str) -> Optional[dict]:
    """
    Bookmark a listing. Saving twice returns the existing row.
    Returns None when the listing does not exist.
    """
    saved = saved_table(await resolve_table(SAVED_LISTING))

    async with AsyncSessionLocal() as session:
        existing = await _find_saved(session, saved, user_id, listing_id)
        if existing:
            return existing

    if not await listing_exists(listing_id):
        return None

    async with AsyncSessionLocal() as session:
        try:
            await session.execute(
                insert(saved).values(
                    id=str(uuid.uuid4()),
                    userId=user_id,
                    listingId=listing_id,
                    createdAt=datetime.now(timezone.utc),
                )
            )
            await session.commit()
        except IntegrityError:
            # Concurrent save of the same listing
            await session.rollback()
            logger.info(f"Listing {listing_id} already saved by {user_id}")

        return await _find_saved(session, saved, user_id, listing_id)


async def unsave_listing(user_id: str, listing_id: str) -> bool:
    """Remove a bookmark; removing a missing bookmark is not an error"""
    table_name = await try_resolve_table(SAVED_LISTING)
    if not table_name:
        return True

    saved = saved_table(table_name)
    async with AsyncSessionLocal() as session:
        await session.execute(
            delete(saved).where(saved.c.userId == user_id, saved.c.listingId == listing_id)
        )
        await session.commit()
    return True


async def get_saved_listings(user_id: str) -> List[dict]:
    """Saved rows newest first, each carrying the shaped listing"""
    saved = saved_table(await resolve_table(SAVED_LISTING))
    listings = listing_table(await resolve_table(LISTING))

    stmt = (
        select(saved)
        .where(saved.c.userId == user_id)
        .order_by(desc(saved.c.createdAt))
    )

    async with AsyncSessionLocal() as session:
        result = await session.execute(stmt)
        saved_rows = [_saved_to_dict(row) for row in result.mappings().all()]

        listing_ids = [row["listingId"] for row in saved_rows]
        listing_rows = []
        if listing_ids:
            listing_result = await session.execute(
                select(listings).where(listings.c.id.in_(listing_ids))
            )
            listing_rows = [dict(row) for row in listing_result.mappings().all()]

    shaped_by_id = {item["id"]: item for item in await attach_owners(listing_rows)}

    items = []
    for row in saved_rows:
        listing = shaped_by_id.get(row["listingId"])
        if listing is None:
            continue
        items.append({**row, "listing": listing})
    return items
