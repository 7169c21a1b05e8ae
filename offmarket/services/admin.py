"""Dashboard counts, user search and role changes for administrators."""

import asyncio
import math
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from offmarket.models import (
    BuyerProfile,
    Inquiry,
    OwnerProfile,
    Property,
    PropertyMatch,
    Role,
    User,
    WantedAd,
)
from offmarket.schemas.admin import AdminStats, StatCounts
from offmarket.schemas.user import AdminUser, AdminUserList, Pagination, RecentUser

RECENT_USERS = 5

# Tables counted on the dashboard, keyed by their StatCounts field.
COUNTED = {
    "users": User,
    "buyers": BuyerProfile,
    "owners": OwnerProfile,
    "properties": Property,
    "wanted_ads": WantedAd,
    "matches": PropertyMatch,
    "inquiries": Inquiry,
}


async def collect_stats(sessionmaker: async_sessionmaker[AsyncSession]) -> AdminStats:
    """Row counts for every marketplace table plus the newest accounts."""

    async def _count(model) -> int:
        async with sessionmaker() as session:
            return (await session.scalar(select(func.count()).select_from(model))) or 0

    async def _recent() -> List[User]:
        async with sessionmaker() as session:
            result = await session.execute(
                select(User).order_by(User.created_at.desc()).limit(RECENT_USERS)
            )
            return list(result.scalars().all())

    *counts, recent = await asyncio.gather(
        *(_count(model) for model in COUNTED.values()),
        _recent(),
    )
    return AdminStats(
        counts=StatCounts(**dict(zip(COUNTED, counts))),
        recent_users=[RecentUser.model_validate(u) for u in recent],
    )


async def list_users(
    db: AsyncSession, page: int = 1, limit: int = 20, search: str = ""
) -> AdminUserList:
    """Page through accounts, newest first, filtered by email or name substring."""
    criteria = []
    if search:
        criteria.append(or_(User.email.contains(search), User.name.contains(search)))

    result = await db.execute(
        select(User)
        .where(*criteria)
        .options(selectinload(User.buyer_profile), selectinload(User.owner_profile))
        .order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    users = result.scalars().all()
    total = (await db.scalar(select(func.count(User.id)).where(*criteria))) or 0

    return AdminUserList(
        users=[
            AdminUser(
                id=u.id,
                email=u.email,
                name=u.name,
                created_at=u.created_at,
                role=u.role,
                is_buyer=u.buyer_profile is not None,
                is_owner=u.owner_profile is not None,
            )
            for u in users
        ],
        pagination=Pagination(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        ),
    )


async def set_role(db: AsyncSession, user_id: str, role: Role) -> Optional[User]:
    user = await db.get(User, user_id)
    if user is None:
        return None
    user.role = role
    await db.commit()
    return user


def page_window(pagination: Pagination) -> Tuple[Optional[int], Optional[int]]:
    """Previous / next page numbers for the users page, None at either end."""
    prev_page = pagination.page - 1 if pagination.page > 1 else None
    next_page = pagination.page + 1 if pagination.page < pagination.pages else None
    return prev_page, next_page
