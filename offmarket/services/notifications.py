"""In-app notification store: listing, unread counts and owner-scoped mutations.

Mutations are single conditional statements scoped to the caller
(``WHERE id = :id AND user_id = :caller``), so a notification is never
touched on behalf of anyone but its owner. When nothing matched, one extra
lookup tells a missing id (404) apart from someone else's (403).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from offmarket.models.notification import Notification, NotificationType
from offmarket.utils.api import FORBIDDEN, NOT_FOUND, ApiError

logger = logging.getLogger(__name__)


@dataclass
class NotificationPage:
    notifications: List[Notification]
    total: int
    unread_count: int


def _unread_of(user_id: str) -> list:
    return [Notification.user_id == user_id, Notification.is_read == False]  # noqa: E712


async def list_notifications(
    sessionmaker: async_sessionmaker[AsyncSession],
    user_id: str,
    limit: int = 20,
    offset: int = 0,
    unread_only: bool = False,
) -> NotificationPage:
    """Newest-first page of a user's notifications plus both counters.

    The three reads are independent, so each runs on its own session and
    they are awaited together.
    """
    criteria = _unread_of(user_id) if unread_only else [Notification.user_id == user_id]

    async def _page() -> List[Notification]:
        async with sessionmaker() as session:
            result = await session.execute(
                select(Notification)
                .where(*criteria)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars().all())

    async def _count(*where) -> int:
        async with sessionmaker() as session:
            return (await session.scalar(select(func.count(Notification.id)).where(*where))) or 0

    notifications, total, unread_count = await asyncio.gather(
        _page(),
        _count(*criteria),
        _count(*_unread_of(user_id)),
    )
    return NotificationPage(notifications=notifications, total=total, unread_count=unread_count)


async def count_unread(db: AsyncSession, user_id: str) -> int:
    return (await db.scalar(select(func.count(Notification.id)).where(*_unread_of(user_id)))) or 0


async def _raise_missing_or_foreign(db: AsyncSession, notification_id: str) -> None:
    exists = await db.scalar(select(Notification.id).where(Notification.id == notification_id))
    if exists is None:
        raise ApiError(404, NOT_FOUND, "Notification not found")
    raise ApiError(403, FORBIDDEN, "Not authorized")


async def mark_read(db: AsyncSession, user_id: str, notification_id: str) -> Notification:
    """Mark one of the caller's notifications read and return it."""
    result = await db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await _raise_missing_or_foreign(db, notification_id)

    await db.commit()
    updated = await db.execute(
        select(Notification)
        .where(Notification.id == notification_id)
        .execution_options(populate_existing=True)
    )
    return updated.scalar_one()


async def mark_all_read(db: AsyncSession, user_id: str) -> int:
    """Mark every unread notification of the user read; returns rows touched."""
    result = await db.execute(
        update(Notification)
        .where(*_unread_of(user_id))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.debug("Marked %s notifications read for %s", result.rowcount, user_id)
    return result.rowcount


async def delete_notification(db: AsyncSession, user_id: str, notification_id: str) -> None:
    result = await db.execute(
        delete(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await _raise_missing_or_foreign(db, notification_id)
    await db.commit()


async def create_notification(
    db: AsyncSession,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Record a notification for ``user_id``; used by event producers."""
    notification = Notification(
        user_id=user_id, type=type, title=title, message=message, data=data
    )
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    return notification
