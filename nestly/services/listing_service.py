"""
Listing Service - listing reads and writes against the resolved listing table

Queries run through SQLAlchemy Core on whatever table name the resolver found,
so results are plain row mappings that go through the shaper and owner
enrichment before leaving this module.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict
from sqlalchemy import select, insert, update, delete, func, asc, desc, table, column
from nestly.database.connection import AsyncSessionLocal
from nestly.database.table_resolver import resolve_table, LISTING
from nestly.models.listing import Listing
from nestly.services.listing_query import (
    ListingQuery,
    LISTING_STATUSES,
    build_where_clause,
    has_more,
)
from nestly.services.listing_shaper import shape_page
from nestly.services.owner_service import attach_owners
from nestly.utils.geo import haversine_km

logger = logging.getLogger(__name__)

# Statuses only an admin may set
MODERATED_STATUSES = ("PUBLISHED", "ARCHIVED")

UPDATABLE_FIELDS = (
    "title", "description", "type", "category", "price", "currency", "address",
    "latitude", "longitude", "area", "rooms", "images", "amenities",
    "availableFrom", "availableTo", "status",
)
REQUIRED_FIELDS = ("title", "type", "category", "price", "currency", "address", "status")


def listing_table(name: str):
    """Core table bound to the resolved name, typed like the Listing model"""
    return table(name, *[column(c.name, c.type) for c in Listing.__table__.columns])


async def _listing_table():
    return listing_table(await resolve_table(LISTING))


async def _fetch_row(session, listings, listing_id: str) -> Optional[dict]:
    result = await session.execute(select(listings).where(listings.c.id == listing_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def _fetch_shaped(listing_id: str) -> Optional[dict]:
    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        row = await _fetch_row(session, listings, listing_id)
    if not row:
        return None
    return (await attach_owners([row]))[0]


async def search_listings(query: ListingQuery) -> dict:
    """
    Public listing grid: filters, ordering and one page of results.

    Raises TableNotFoundError when no listing table can be resolved.
    """
    listings = await _listing_table()
    where_clause = build_where_clause(listings, query.filters)

    async with AsyncSessionLocal() as session:
        count_stmt = select(func.count()).select_from(listings)
        if where_clause is not None:
            count_stmt = count_stmt.where(where_clause)
        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        order = asc if query.ascending else desc
        stmt = select(listings)
        if where_clause is not None:
            stmt = stmt.where(where_clause)
        stmt = (
            stmt.order_by(order(listings.c[query.sort_field]), order(listings.c.id))
            .offset(query.skip)
            .limit(query.page_size)
        )

        result = await session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]

    shaped = await attach_owners(rows)
    return shape_page(
        shaped,
        page=query.page,
        page_size=query.page_size,
        total=total,
        has_more=has_more(query.skip, len(shaped), total),
    )


async def create_listing(owner_id: str, listing_data: Dict) -> dict:
    """Insert a listing; new listings always wait for moderation"""
    listings = await _listing_table()
    now = datetime.now(timezone.utc)
    listing_id = str(uuid.uuid4())

    values = {
        "id": listing_id,
        "title": listing_data["title"],
        "description": listing_data.get("description") or "",
        "type": listing_data["type"],
        "category": listing_data["category"],
        "price": listing_data["price"],
        "currency": listing_data.get("currency") or "UAH",
        "address": listing_data["address"],
        "latitude": listing_data.get("latitude"),
        "longitude": listing_data.get("longitude"),
        "area": listing_data.get("area"),
        "rooms": listing_data.get("rooms"),
        "images": listing_data.get("images") or [],
        "amenities": listing_data.get("amenities") or [],
        "availableFrom": listing_data.get("availableFrom"),
        "availableTo": listing_data.get("availableTo"),
        "status": "PENDING_REVIEW",
        "ownerId": owner_id,
        "views": 0,
        "createdAt": now,
        "updatedAt": now,
    }

    async with AsyncSessionLocal() as session:
        await session.execute(insert(listings).values(**values))
        await session.commit()
        row = await _fetch_row(session, listings, listing_id)

    logger.info(f"Listing created: {listing_id} by {owner_id}")
    return (await attach_owners([row]))[0]


async def get_listing(listing_id: str, count_view: bool = True) -> Optional[dict]:
    """Get listing by ID; a successful read bumps the view counter"""
    listings = await _listing_table()

    async with AsyncSessionLocal() as session:
        row = await _fetch_row(session, listings, listing_id)
        if not row:
            return None

        if count_view:
            await session.execute(
                update(listings)
                .where(listings.c.id == listing_id)
                .values(views=func.coalesce(listings.c.views, 0) + 1)
            )
            await session.commit()
            row["views"] = (row.get("views") or 0) + 1

    return (await attach_owners([row]))[0]


async def get_listing_owner_id(listing_id: str) -> Optional[str]:
    """Owner id of a listing, or None when it does not exist"""
    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(listings.c.ownerId).where(listings.c.id == listing_id))
        row = result.first()
        return row[0] if row else None


async def listing_exists(listing_id: str) -> bool:
    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(listings.c.id).where(listings.c.id == listing_id))
        return result.first() is not None


def _check_can_modify(owner_id: str, user: dict) -> None:
    if owner_id != user.get("id") and user.get("role") != "ADMIN":
        raise PermissionError("Forbidden")


async def update_listing(listing_id: str, user: dict, update_data: Dict) -> Optional[dict]:
    """Partial update by the owner or an admin"""
    owner_id = await get_listing_owner_id(listing_id)
    if owner_id is None:
        return None
    _check_can_modify(owner_id, user)

    values = {key: update_data[key] for key in UPDATABLE_FIELDS if key in update_data}
    for key in REQUIRED_FIELDS:
        if key in values and values[key] is None:
            values.pop(key)

    new_status = values.get("status")
    if new_status is not None:
        if new_status not in LISTING_STATUSES:
            raise ValueError("Invalid status")
        if new_status in MODERATED_STATUSES and user.get("role") != "ADMIN":
            raise PermissionError("Only an admin can publish or archive a listing")

    for key in ("images", "amenities"):
        if key in values and values[key] is None:
            values[key] = []

    values["updatedAt"] = datetime.now(timezone.utc)

    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        await session.execute(update(listings).where(listings.c.id == listing_id).values(**values))
        await session.commit()

    logger.info(f"Listing updated: {listing_id} by {user.get('id')}")
    return await _fetch_shaped(listing_id)


async def delete_listing(listing_id: str, user: dict) -> bool:
    owner_id = await get_listing_owner_id(listing_id)
    if owner_id is None:
        return False
    _check_can_modify(owner_id, user)

    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        await session.execute(delete(listings).where(listings.c.id == listing_id))
        await session.commit()

    logger.info(f"Listing deleted: {listing_id} by {user.get('id')}")
    return True


async def get_listings_by_owner(owner_id: str) -> List[dict]:
    """All of a user's listings in every status, newest first"""
    listings = await _listing_table()
    stmt = (
        select(listings)
        .where(listings.c.ownerId == owner_id)
        .order_by(desc(listings.c.createdAt), desc(listings.c.id))
    )
    async with AsyncSessionLocal() as session:
        result = await session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]
    return await attach_owners(rows)


async def get_listings_for_admin(status: Optional[str] = None) -> List[dict]:
    listings = await _listing_table()
    stmt = select(listings)
    if status in LISTING_STATUSES:
        stmt = stmt.where(listings.c.status == status)
    stmt = stmt.order_by(desc(listings.c.createdAt), desc(listings.c.id))

    async with AsyncSessionLocal() as session:
        result = await session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]
    return await attach_owners(rows)


async def set_listing_status(listing_id: str, status: str) -> Optional[dict]:
    """Moderation transition (approve -> PUBLISHED, reject -> ARCHIVED)"""
    if status not in LISTING_STATUSES:
        raise ValueError("Invalid status")

    listings = await _listing_table()
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            update(listings)
            .where(listings.c.id == listing_id)
            .values(status=status, updatedAt=datetime.now(timezone.utc))
        )
        await session.commit()
        if not result.rowcount:
            return None

    logger.info(f"Listing {listing_id} moved to {status}")
    return await _fetch_shaped(listing_id)


async def get_nearby_listings(
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
    limit: int = 50,
) -> List[dict]:
    """Published listings with coordinates, closest first, each with `distance` in km"""
    listings = await _listing_table()
    stmt = select(listings).where(
        listings.c.status == "PUBLISHED",
        listings.c.latitude.is_not(None),
        listings.c.longitude.is_not(None),
    )

    async with AsyncSessionLocal() as session:
        result = await session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]

    with_distance = []
    for row in rows:
        distance = haversine_km(lat, lng, row["latitude"], row["longitude"])
        if radius_km is not None and distance > radius_km:
            continue
        with_distance.append((distance, row))

    with_distance.sort(key=lambda pair: pair[0])
    with_distance = with_distance[:limit]

    shaped = await attach_owners([row for _, row in with_distance])
    for item, (distance, _) in zip(shaped, with_distance):
        item["distance"] = round(distance, 3)
    return shaped
