"""
Test Case Suite: Listing Query Compiler
Test ID Range: TC-101 to TC-115

Validates how raw query-string parameters become filters, ordering and
pagination for the public listing grid. No database involved.
"""

import pytest
from nestly.services.listing_query import (
    compile_listing_query,
    compile_filters,
    parse_number,
    resolve_pagination,
    resolve_sort,
    has_more,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)


class TestNumberParsing:
    """
    Test Case TC-101: Parse Numeric Parameters
    Description: Only finite numbers are accepted; everything else counts as absent
    Expected Result: None for empty, garbage, NaN and infinite values
    """
    @pytest.mark.parametrize("raw,expected", [
        ("500", 500.0),
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("1_000", None),
        ("1_0.5", None),
        ("\u0661\u0662", None),
        ("", None),
        (None, None),
        ("abc", None),
        ("NaN", None),
        ("Infinity", None),
        ("-inf", None),
    ])
    def test_tc101_parse_number(self, raw, expected):
        """TC-101: Parse numeric parameters"""
        assert parse_number(raw) == expected


class TestPagination:
    """
    Test Case TC-102: Pagination Defaults and Clamping
    Description: page >= 1, 1 <= pageSize <= 1000, zero counts as absent
    Expected Result: Defaults page 1 / size 12, oversized limits clamp to 1000
    """
    def test_tc102_defaults(self):
        """TC-102: Missing pagination params use defaults"""
        assert resolve_pagination(None, None) == (1, DEFAULT_PAGE_SIZE)

    @pytest.mark.parametrize("page,limit,expected", [
        ("0", "0", (1, DEFAULT_PAGE_SIZE)),
        ("-3", "5", (1, 5)),
        ("2", "5000", (2, MAX_PAGE_SIZE)),
        ("2.7", "3.9", (2, 3)),
        ("x", "-4", (1, 1)),
    ])
    def test_tc103_clamping(self, page, limit, expected):
        """TC-103: Out-of-range pagination values are clamped"""
        assert resolve_pagination(page, limit) == expected

    def test_tc104_skip_and_has_more(self):
        """TC-104: skip = (page-1)*pageSize and hasMore compares against total"""
        query = compile_listing_query({"page": "3", "limit": "10"})
        assert query.skip == 20
        assert has_more(20, 10, 35) is True
        assert has_more(30, 5, 35) is False


class TestSorting:
    """
    Test Case TC-105: Sort Keys
    Description: Recognized sortBy values map to a column and direction
    Expected Result: Unknown values fall back to newest first
    """
    @pytest.mark.parametrize("sort_by,expected", [
        ("priceAsc", ("price", True)),
        ("priceDesc", ("price", False)),
        ("oldest", ("createdAt", True)),
        ("newest", ("createdAt", False)),
        ("relevance", ("createdAt", False)),
        ("popular", ("createdAt", False)),
        (None, ("createdAt", False)),
    ])
    def test_tc105_sort_keys(self, sort_by, expected):
        """TC-105: sortBy mapping"""
        assert resolve_sort(sort_by) == expected


class TestFilters:
    """
    Test Case TC-106: Status Filter
    Description: Default shows only PUBLISHED, "all" lifts the filter
    Expected Result: Invalid statuses behave like absent ones
    """
    def test_tc106_default_status_is_published(self):
        """TC-106: Absent or invalid status means PUBLISHED"""
        assert ("status", "eq", "PUBLISHED") in compile_filters({})
        assert ("status", "eq", "PUBLISHED") in compile_filters({"status": "deleted"})

    def test_tc107_status_all_and_explicit(self):
        """TC-107: status=all removes the filter, a valid status is used as-is"""
        assert not [f for f in compile_filters({"status": "all"}) if f[0] == "status"]
        assert ("status", "eq", "DRAFT") in compile_filters({"status": "DRAFT"})

    """
    Test Case TC-108: Type and Category Filters
    Description: Only known enum values filter; others are dropped silently
    Expected Result: No error and no filter for unknown values
    """
    def test_tc108_type_and_category(self):
        """TC-108: Type and category filters"""
        filters = compile_filters({"type": "SALE", "category": "HOUSE"})
        assert ("type", "eq", "SALE") in filters
        assert ("category", "eq", "HOUSE") in filters

        filters = compile_filters({"type": "LEASE", "category": "castle"})
        assert [f[0] for f in filters] == ["status"]

    def test_tc109_price_and_area_ranges(self):
        """TC-109: Ranges are inclusive and malformed bounds are ignored"""
        filters = compile_filters({"minPrice": "500", "maxPrice": "1000", "minArea": "abc", "maxArea": "80"})
        assert ("price", "gte", 500.0) in filters
        assert ("price", "lte", 1000.0) in filters
        assert ("area", "lte", 80.0) in filters
        assert not [f for f in filters if f[:2] == ("area", "gte")]

    """
    Test Case TC-110: Rooms Filter
    Description: Fewer than 4 rooms is an exact match, 4 or more means "at least"
    Expected Result: eq for 1-3, gte for 4+
    """
    @pytest.mark.parametrize("rooms,expected", [
        ("2", ("rooms", "eq", 2.0)),
        ("3", ("rooms", "eq", 3.0)),
        ("4", ("rooms", "gte", 4.0)),
        ("6", ("rooms", "gte", 6.0)),
    ])
    def test_tc110_rooms(self, rooms, expected):
        """TC-110: Rooms filter threshold"""
        assert expected in compile_filters({"rooms": rooms})

    def test_tc111_garbage_never_raises(self):
        """TC-111: A fully malformed query compiles to the default query"""
        query = compile_listing_query({
            "page": "first",
            "limit": "lots",
            "status": "?",
            "type": "",
            "minPrice": "cheap",
            "rooms": "many",
            "sortBy": "random",
        })
        assert query.filters == [("status", "eq", "PUBLISHED")]
        assert (query.page, query.page_size) == (1, DEFAULT_PAGE_SIZE)
        assert (query.sort_field, query.ascending) == ("createdAt", False)
