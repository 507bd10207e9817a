"""
Listing Query - turns raw query-string parameters into filters, ordering and pagination

Nothing in here talks to the database. Malformed or unknown values are dropped
silently: the public grid never rejects a request because of a bad filter.
"""
import math
from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Mapping, Any
from sqlalchemy import and_

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 1000

LISTING_STATUSES = ("DRAFT", "PENDING_REVIEW", "PUBLISHED", "ARCHIVED")
LISTING_TYPES = ("RENT", "SALE")
LISTING_CATEGORIES = ("APARTMENT", "HOUSE", "COMMERCIAL")

# sortBy -> (column, ascending)
SORT_ORDERS = {
    "priceAsc": ("price", True),
    "priceDesc": ("price", False),
    "oldest": ("createdAt", True),
    "newest": ("createdAt", False),
    "relevance": ("createdAt", False),
}
DEFAULT_SORT = ("createdAt", False)

# Rooms at or above this value mean "N or more"
ROOMS_AT_LEAST_THRESHOLD = 4

Filter = Tuple[str, str, Any]  # (column, op, value), op in eq/gte/lte


@dataclass
class ListingQuery:
    filters: List[Filter] = field(default_factory=list)
    sort_field: str = "createdAt"
    ascending: bool = False
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


def parse_number(value: Optional[str]) -> Optional[float]:
    """Finite number or None; empty strings, garbage, NaN and inf are all None"""
    if value is None:
        return None
    value = str(value).strip()
    # float() also takes digit separators and non-ASCII digits
    if not value or "_" in value or not value.isascii():
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def resolve_pagination(page_param: Optional[str], limit_param: Optional[str]) -> Tuple[int, int]:
    """Returns (page, page_size); zero counts as absent for both"""
    page = parse_number(page_param)
    limit = parse_number(limit_param)

    page = int(page) if page else 1
    page_size = int(limit) if limit else DEFAULT_PAGE_SIZE

    page = max(page, 1)
    page_size = max(1, min(page_size, MAX_PAGE_SIZE))
    return page, page_size


def resolve_sort(sort_by: Optional[str]) -> Tuple[str, bool]:
    return SORT_ORDERS.get(sort_by or "", DEFAULT_SORT)


def compile_filters(params: Mapping[str, str]) -> List[Filter]:
    filters: List[Filter] = []

    status = params.get("status")
    if status == "all":
        pass
    elif status in LISTING_STATUSES:
        filters.append(("status", "eq", status))
    else:
        filters.append(("status", "eq", "PUBLISHED"))

    listing_type = params.get("type")
    if listing_type in LISTING_TYPES:
        filters.append(("type", "eq", listing_type))

    category = params.get("category")
    if category in LISTING_CATEGORIES:
        filters.append(("category", "eq", category))

    for param, column_name, op in (
        ("minPrice", "price", "gte"),
        ("maxPrice", "price", "lte"),
        ("minArea", "area", "gte"),
        ("maxArea", "area", "lte"),
    ):
        value = parse_number(params.get(param))
        if value is not None:
            filters.append((column_name, op, value))

    rooms = parse_number(params.get("rooms"))
    if rooms is not None:
        if rooms >= ROOMS_AT_LEAST_THRESHOLD:
            filters.append(("rooms", "gte", rooms))
        else:
            filters.append(("rooms", "eq", rooms))

    return filters


def compile_listing_query(params: Mapping[str, str]) -> ListingQuery:
    """Compile the public listings query string"""
    page, page_size = resolve_pagination(params.get("page"), params.get("limit"))
    sort_field, ascending = resolve_sort(params.get("sortBy"))
    return ListingQuery(
        filters=compile_filters(params),
        sort_field=sort_field,
        ascending=ascending,
        page=page,
        page_size=page_size,
    )


def build_where_clause(listing_table, filters: List[Filter]):
    """SQLAlchemy condition for the compiled filters (None when unfiltered)"""
    conditions = []
    for column_name, op, value in filters:
        col = listing_table.c[column_name]
        if op == "eq":
            conditions.append(col == value)
        elif op == "gte":
            conditions.append(col >= value)
        elif op == "lte":
            conditions.append(col <= value)
        else:
            raise ValueError(f"Unsupported filter operator: {op}")

    if not conditions:
        return None
    return and_(*conditions)


def has_more(skip: int, returned: int, total: int) -> bool:
    return skip + returned < total
