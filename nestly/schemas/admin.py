from pydantic import BaseModel
from typing import List


class DayCount(BaseModel):
    date: str  # dd.MM
    count: int


class AdminStatsResponse(BaseModel):
    totalListings: int
    totalUsers: int
    pendingListings: int
    listingsThisWeek: int
    usersThisWeek: int
    listingsByDay: List[DayCount]
    usersByDay: List[DayCount]
