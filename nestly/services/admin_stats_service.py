"""
Admin Stats Service - dashboard counters and this week's activity
"""
from datetime import datetime, timedelta, timezone, date
from typing import Optional, List, Dict
from sqlalchemy import select, func, and_
from nestly.database.connection import AsyncSessionLocal
from nestly.models.listing import Listing
from nestly.models.user import User


def week_bounds(now: datetime):
    """Monday 00:00 to Sunday 23:59:59.999999 of the week containing `now`"""
    start = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def series_by_day(week_start: datetime, timestamps: List[datetime]) -> List[Dict]:
    """Seven {date: 'dd.MM', count} buckets starting Monday"""
    dates = [_as_date(ts) for ts in timestamps]
    series = []
    for offset in range(7):
        day = (week_start + timedelta(days=offset)).date()
        series.append({
            "date": day.strftime("%d.%m"),
            "count": sum(1 for d in dates if d == day),
        })
    return series


async def get_admin_stats(now: Optional[datetime] = None) -> Dict:
    now = now or datetime.now(timezone.utc)
    week_start, week_end = week_bounds(now)

    async with AsyncSessionLocal() as session:
        total_listings = (await session.execute(
            select(func.count()).select_from(Listing)
        )).scalar_one() or 0

        total_users = (await session.execute(
            select(func.count()).select_from(User)
        )).scalar_one() or 0

        pending_listings = (await session.execute(
            select(func.count()).select_from(Listing).where(Listing.status == "PENDING_REVIEW")
        )).scalar_one() or 0

        listing_dates = (await session.execute(
            select(Listing.created_at).where(
                and_(Listing.created_at >= week_start, Listing.created_at <= week_end)
            )
        )).scalars().all()

        user_dates = (await session.execute(
            select(User.created_at).where(
                and_(User.created_at >= week_start, User.created_at <= week_end)
            )
        )).scalars().all()

    return {
        "totalListings": total_listings,
        "totalUsers": total_users,
        "pendingListings": pending_listings,
        "listingsThisWeek": len(listing_dates),
        "usersThisWeek": len(user_dates),
        "listingsByDay": series_by_day(week_start, listing_dates),
        "usersByDay": series_by_day(week_start, user_dates),
    }
