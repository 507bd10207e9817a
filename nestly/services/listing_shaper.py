"""
Listing Shaper - normalizes raw listing rows into the canonical API payload

Rows can come from differently spelled tables, so fields are looked up under
both their camelCase and snake_case names.
"""
from datetime import datetime, date, timezone
from typing import Optional, Mapping, Any, List

# canonical key -> alternate spellings
FIELD_ALIASES = {
    "ownerId": ("ownerId", "owner_id"),
    "availableFrom": ("availableFrom", "available_from"),
    "availableTo": ("availableTo", "available_to"),
    "createdAt": ("createdAt", "created_at"),
    "updatedAt": ("updatedAt", "updated_at"),
}


def pick_field(row: Mapping[str, Any], key: str) -> Any:
    for name in FIELD_ALIASES.get(key, (key,)):
        value = row.get(name)
        if value is not None:
            return value
    return None


def _iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def owner_placeholder(owner_id: Optional[str]) -> dict:
    return {"id": owner_id or "", "name": None, "email": None, "avatar": None}


def shape_listing(row: Mapping[str, Any], owner: Optional[dict] = None) -> dict:
    """Canonical listing dict with defaults applied and owner attached"""
    owner_id = pick_field(row, "ownerId")

    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "description": row.get("description") or "",
        "type": row.get("type"),
        "category": row.get("category"),
        "price": row.get("price"),
        "currency": row.get("currency") or "UAH",
        "address": row.get("address"),
        "latitude": row.get("latitude"),
        "longitude": row.get("longitude"),
        "area": row.get("area"),
        "rooms": row.get("rooms"),
        "images": row.get("images") or [],
        "amenities": row.get("amenities") or [],
        "availableFrom": _iso(pick_field(row, "availableFrom")),
        "availableTo": _iso(pick_field(row, "availableTo")),
        "status": row.get("status"),
        "ownerId": owner_id,
        "views": row.get("views") or 0,
        "createdAt": _iso(pick_field(row, "createdAt")) or _now_iso(),
        "updatedAt": _iso(pick_field(row, "updatedAt")) or _now_iso(),
        "owner": owner or owner_placeholder(owner_id),
    }


def empty_page(page: int, page_size: int, error: str) -> dict:
    """Failure envelope; same shape as a successful page"""
    return {
        "success": False,
        "error": error,
        "listings": [],
        "page": page,
        "pageSize": page_size,
        "total": 0,
        "hasMore": False,
    }


def shape_page(listings: List[dict], page: int, page_size: int, total: int, has_more: bool) -> dict:
    return {
        "listings": listings,
        "page": page,
        "pageSize": page_size,
        "total": total,
        "hasMore": has_more,
    }
