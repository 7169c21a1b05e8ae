"""Notifications router — list, unread badge count, mark read, delete."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from offmarket.database import get_db, get_sessionmaker
from offmarket.routers.auth import require_claims
from offmarket.schemas.common import ApiResponse
from offmarket.schemas.notification import (
    Deleted,
    Marked,
    NotificationList,
    NotificationOut,
    UnreadCount,
)
from offmarket.schemas.user import TokenClaims
from offmarket.services import notifications as notification_service
from offmarket.utils.api import api_ok, server_errors

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[NotificationList], response_model_exclude_unset=True)
@router.get(
    "/",
    response_model=ApiResponse[NotificationList],
    response_model_exclude_unset=True,
    include_in_schema=False,
)
async def list_notifications(
    limit: int = Query(20, ge=0),
    offset: int = Query(0, ge=0),
    unread_only: str = Query("false", alias="unreadOnly"),
    claims: TokenClaims = Depends(require_claims),
    sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
):
    """Newest-first page of the caller's notifications with total and unread counts."""
    with server_errors("Failed to fetch notifications"):
        page = await notification_service.list_notifications(
            sessionmaker, claims.sub, limit=limit, offset=offset, unread_only=unread_only == "true"
        )
        return api_ok(
            NotificationList(
                notifications=[NotificationOut.model_validate(n) for n in page.notifications],
                total=page.total,
                unread_count=page.unread_count,
            )
        )


@router.get("/unread-count", response_model=ApiResponse[UnreadCount], response_model_exclude_unset=True)
async def unread_count(
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    """Unread count only, for the header badge."""
    with server_errors("Failed to fetch unread count"):
        count = await notification_service.count_unread(db, claims.sub)
        return api_ok(UnreadCount(count=count))


@router.patch("/read-all", response_model=ApiResponse[Marked], response_model_exclude_unset=True)
async def mark_all_read(
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    """Mark all of the caller's notifications as read."""
    with server_errors("Failed to mark notifications as read"):
        await notification_service.mark_all_read(db, claims.sub)
        return api_ok(Marked(marked=True))


@router.patch(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationOut],
    response_model_exclude_unset=True,
)
async def mark_read(
    notification_id: str,
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    """Mark a single notification as read and return it."""
    with server_errors("Failed to mark notification as read"):
        notification = await notification_service.mark_read(db, claims.sub, notification_id)
        return api_ok(NotificationOut.model_validate(notification))


@router.delete("/{notification_id}", response_model=ApiResponse[Deleted], response_model_exclude_unset=True)
async def delete_notification(
    notification_id: str,
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    with server_errors("Failed to delete notification"):
        await notification_service.delete_notification(db, claims.sub, notification_id)
        return api_ok(Deleted(deleted=True))
