"""
Table Resolver - discovers the real name of a backing table

The hosted schema has been created with different spellings across
environments ("Listing" vs "listings" ...). Every logical entity has an ordered
list of candidate names; the first one that answers a trivial existence query
wins. The discovered name is cached for the lifetime of the process.
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy import select, table, column
from nestly.database.connection import AsyncSessionLocal

logger = logging.getLogger(__name__)

LISTING = "listing"
USER = "user"
SAVED_LISTING = "saved_listing"
CONVERSATION = "conversation"
MESSAGE = "message"

TABLE_CANDIDATES: Dict[str, List[str]] = {
    LISTING: ["Listing", "listings", "Listings", "listing"],
    USER: ["User", "user", "Users", "users"],
    SAVED_LISTING: ["SavedListing", "savedListing", "saved_listings", "SavedListings"],
    CONVERSATION: ["conversations", "Conversation"],
    MESSAGE: ["messages", "Message"],
}

_resolved: Dict[str, str] = {}


class TableNotFoundError(LookupError):
    """Raised when none of the candidate table names exist"""

    def __init__(self, entity: str, candidates: List[str]):
        self.entity = entity
        self.candidates = candidates
        super().__init__(f"No table found for '{entity}' (tried: {', '.join(candidates)})")


async def _table_exists(name: str) -> bool:
    async with AsyncSessionLocal() as session:
        try:
            await session.execute(select(table(name, column("id")).c.id).limit(1))
            return True
        except Exception as e:
            # A failed probe leaves the transaction aborted on Postgres
            await session.rollback()
            logger.debug(f"Table probe failed for '{name}': {e}")
            return False


async def resolve_table(entity: str) -> str:
    """Return the actual table name for a logical entity, probing on first use"""
    cached = _resolved.get(entity)
    if cached:
        return cached

    candidates = TABLE_CANDIDATES[entity]
    for name in candidates:
        if await _table_exists(name):
            _resolved[entity] = name
            logger.info(f"Resolved table for '{entity}': {name}")
            return name

    logger.error(f"Table for '{entity}' not found. Tried: {candidates}")
    raise TableNotFoundError(entity, candidates)


async def try_resolve_table(entity: str) -> Optional[str]:
    """Like resolve_table but returns None instead of raising"""
    try:
        return await resolve_table(entity)
    except TableNotFoundError:
        return None


def clear_table_cache(entity: Optional[str] = None) -> None:
    if entity is None:
        _resolved.clear()
    else:
        _resolved.pop(entity, None)
