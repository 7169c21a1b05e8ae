"""
Notifications inbox page for signed-in users.

Reads and mutations go through the same owner-scoped service as the API;
the caller comes from the ``access_token`` cookie instead of a bearer header.

Endpoints:
    GET  /notifications                → inbox (sign-in prompt when anonymous)
    POST /notifications/read-all       → mark everything read
    POST /notifications/{id}/read      → mark one read
    POST /notifications/{id}/open      → mark read, then follow its link
    POST /notifications/{id}/delete    → delete one
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from offmarket.database import get_db, get_sessionmaker
from offmarket.models.notification import Notification
from offmarket.routers.auth import get_session_claims
from offmarket.services import notifications as notification_service
from offmarket.utils.api import ApiError
from offmarket.utils.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notification-pages"], include_in_schema=False)

INBOX_URL = "/notifications"
SIGN_IN_URL = "/auth/signin?callbackUrl=/notifications"

# data key → page the notification points at
LINK_TARGETS = [
    ("inquiryId", "/inquiries/{}"),
    ("propertyId", "/owner/properties/{}"),
    ("wantedAdId", "/wanted/{}"),
]


def notification_link(notification: Notification) -> Optional[str]:
    data = notification.data or {}
    for key, pattern in LINK_TARGETS:
        if data.get(key):
            return pattern.format(data[key])
    return None


def _back(url: str = INBOX_URL) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("", response_class=HTMLResponse)
async def inbox(
    request: Request,
    sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
):
    claims = get_session_claims(request)
    if claims is None:
        return templates.TemplateResponse(
            request, "notifications.html", {"signed_in": False, "sign_in_url": SIGN_IN_URL}
        )

    page = None
    error = None
    try:
        page = await notification_service.list_notifications(sessionmaker, claims.sub)
    except SQLAlchemyError:
        logger.exception("Failed to load notifications for %s", claims.sub)
        error = "Failed to load notifications"

    items = []
    if page:
        items = [{"notification": n, "link": notification_link(n)} for n in page.notifications]

    return templates.TemplateResponse(
        request,
        "notifications.html",
        {
            "signed_in": True,
            "items": items,
            "unread_count": page.unread_count if page else 0,
            "error": error,
        },
    )


@router.post("/read-all")
async def read_all(request: Request, db: AsyncSession = Depends(get_db)):
    claims = get_session_claims(request)
    if claims is None:
        return _back(SIGN_IN_URL)
    await notification_service.mark_all_read(db, claims.sub)
    return _back()


@router.post("/{notification_id}/read")
async def read_one(notification_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    claims = get_session_claims(request)
    if claims is None:
        return _back(SIGN_IN_URL)
    try:
        await notification_service.mark_read(db, claims.sub, notification_id)
    except ApiError as exc:
        logger.warning("Mark read of %s by %s refused: %s", notification_id, claims.sub, exc.message)
    return _back()


@router.post("/{notification_id}/open")
async def open_one(notification_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    claims = get_session_claims(request)
    if claims is None:
        return _back(SIGN_IN_URL)
    try:
        notification = await notification_service.mark_read(db, claims.sub, notification_id)
    except ApiError as exc:
        logger.warning("Open of %s by %s refused: %s", notification_id, claims.sub, exc.message)
        return _back()
    return _back(notification_link(notification) or INBOX_URL)


@router.post("/{notification_id}/delete")
async def delete_one(notification_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    claims = get_session_claims(request)
    if claims is None:
        return _back(SIGN_IN_URL)
    try:
        await notification_service.delete_notification(db, claims.sub, notification_id)
    except ApiError as exc:
        logger.warning("Delete of %s by %s refused: %s", notification_id, claims.sub, exc.message)
    return _back()
