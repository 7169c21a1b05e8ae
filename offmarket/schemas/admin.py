"""Admin dashboard Pydantic schemas."""

from typing import List

from offmarket.schemas.common import CamelModel
from offmarket.schemas.user import RecentUser


class StatCounts(CamelModel):
    users: int
    buyers: int
    owners: int
    properties: int
    wanted_ads: int
    matches: int
    inquiries: int


class AdminStats(CamelModel):
    counts: StatCounts
    recent_users: List[RecentUser]
