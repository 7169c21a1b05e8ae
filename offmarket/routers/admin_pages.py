"""
Admin pages router — the role-gated admin shell, dashboard and user list.

Each page resolves an AdminGate first: anonymous visitors go to sign-in,
non-admins go home, admins get the page.

Endpoints:
    GET  /admin                   → dashboard (stat cards + recent users)
    GET  /admin/users             → searchable, paginated user list
    POST /admin/users/{id}/role   → toggle USER / ADMIN from the list
"""

import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from offmarket.database import get_db, get_sessionmaker
from offmarket.models.user import Role
from offmarket.routers.auth import get_session_claims
from offmarket.services import admin as admin_service
from offmarket.services import auth as auth_service
from offmarket.services.admin_gate import AdminGate
from offmarket.utils.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-pages"], include_in_schema=False)

NAV_ITEMS = [
    {"href": "/admin", "label": "Dashboard"},
    {"href": "/admin/users", "label": "Users"},
]

# (label, StatCounts field, colour)
STAT_CARDS = [
    ("Total Users", "users", "blue"),
    ("Buyers", "buyers", "green"),
    ("Owners", "owners", "purple"),
    ("Properties", "properties", "orange"),
    ("Buyer Interests", "wanted_ads", "pink"),
    ("Matches", "matches", "cyan"),
    ("Inquiries", "inquiries", "yellow"),
]


async def _gate(request: Request, db: AsyncSession, callback_url: Optional[str] = None) -> AdminGate:
    gate = AdminGate(callback_url=callback_url or request.url.path)
    return await gate.resolve(get_session_claims(request), partial(auth_service.lookup_role, db))


def _redirect(gate: AdminGate) -> RedirectResponse:
    return RedirectResponse(url=gate.redirect_url, status_code=status.HTTP_303_SEE_OTHER)


def _shell(request: Request, **context) -> dict:
    return {"nav_items": NAV_ITEMS, "current_path": request.url.path, **context}


# ═══════════════════════════════════════════════════════════════
#  GET /admin (dashboard)
# ═══════════════════════════════════════════════════════════════

@router.get("", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    db: AsyncSession = Depends(get_db),
    sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
):
    gate = await _gate(request, db)
    if not gate.should_render:
        return _redirect(gate)

    stats = None
    try:
        stats = await admin_service.collect_stats(sessionmaker)
    except SQLAlchemyError:
        logger.exception("Failed to fetch stats")

    cards = []
    if stats:
        cards = [
            {"label": label, "value": getattr(stats.counts, field), "color": color}
            for label, field, color in STAT_CARDS
        ]

    return templates.TemplateResponse(
        request,
        "admin/dashboard.html",
        _shell(request, stats=stats, cards=cards),
    )


# ═══════════════════════════════════════════════════════════════
#  GET /admin/users
# ═══════════════════════════════════════════════════════════════

@router.get("/users", response_class=HTMLResponse)
async def users_page(
    request: Request,
    page: int = 1,
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    gate = await _gate(request, db)
    if not gate.should_render:
        return _redirect(gate)

    listing = await admin_service.list_users(db, page=max(page, 1), limit=20, search=search)
    prev_page, next_page = admin_service.page_window(listing.pagination)

    return templates.TemplateResponse(
        request,
        "admin/users.html",
        _shell(
            request,
            users=listing.users,
            pagination=listing.pagination,
            prev_page=prev_page,
            next_page=next_page,
            search=search,
            current_user_id=gate.claims.sub,
        ),
    )


@router.post("/users/{user_id}/role")
async def toggle_role(
    user_id: str,
    request: Request,
    role: str = Form(""),
    return_to: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
):
    gate = await _gate(request, db, callback_url="/admin/users")
    if not gate.should_render:
        return _redirect(gate)

    target = return_to if return_to and return_to.startswith("/admin/users") else "/admin/users"
    try:
        new_role = Role(role)
    except ValueError:
        logger.warning("Ignoring role change for %s to unknown role %r", user_id, role)
        return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)

    user = await admin_service.set_role(db, user_id, new_role)
    if user is None:
        logger.warning("Role change for unknown user %s", user_id)
    else:
        logger.info("Admin %s set role of %s to %s", gate.claims.sub, user.id, new_role.value)

    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
