"""
Owner Service - batch owner lookup for listing pages
"""
import logging
from typing import Dict, Iterable, List, Mapping, Any
from sqlalchemy import select, table, column
from nestly.database.connection import AsyncSessionLocal
from nestly.database.table_resolver import try_resolve_table, USER
from nestly.services.listing_shaper import shape_listing, pick_field

logger = logging.getLogger(__name__)


def user_table(name: str):
    return table(name, column("id"), column("name"), column("email"), column("avatar"))


async def fetch_owners(owner_ids: Iterable[str]) -> Dict[str, dict]:
    """One `id IN (...)` query for all distinct owners; missing owners are simply absent"""
    ids = sorted({owner_id for owner_id in owner_ids if owner_id})
    if not ids:
        return {}

    table_name = await try_resolve_table(USER)
    if not table_name:
        logger.warning("User table not resolvable; owners fall back to placeholders")
        return {}

    users = user_table(table_name)
    stmt = select(users.c.id, users.c.name, users.c.email, users.c.avatar).where(users.c.id.in_(ids))

    async with AsyncSessionLocal() as session:
        result = await session.execute(stmt)
        return {row["id"]: dict(row) for row in result.mappings().all()}


async def attach_owners(rows: List[Mapping[str, Any]]) -> List[dict]:
    """Shape every row and merge its owner; used by every listing-returning path"""
    owners = await fetch_owners(pick_field(row, "ownerId") for row in rows)
    return [shape_listing(row, owners.get(pick_field(row, "ownerId"))) for row in rows]
