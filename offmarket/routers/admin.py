"""
Admin API router — dashboard stats and user management.

Every route requires a bearer token whose account has the ADMIN role.

Endpoints:
    GET   /api/admin/stats             → table counts + recent users
    GET   /api/admin/users             → paginated, searchable user list
    PATCH /api/admin/users/{id}/role   → promote / demote an account
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from offmarket.database import get_db, get_sessionmaker
from offmarket.models.user import Role, User
from offmarket.routers.auth import require_claims
from offmarket.schemas.admin import AdminStats
from offmarket.schemas.common import ApiResponse
from offmarket.schemas.user import AdminUserList, RoleChanged, RoleUpdate, TokenClaims
from offmarket.services import admin as admin_service
from offmarket.utils.api import FORBIDDEN, NOT_FOUND, ApiError, api_ok, server_errors

logger = logging.getLogger(__name__)


async def require_admin(
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Reject callers whose account is missing or not an administrator."""
    with server_errors("Failed to verify admin access"):
        user = await db.get(User, claims.sub)
    if user is None or user.role != Role.ADMIN:
        raise ApiError(403, FORBIDDEN, "Admin access required")
    return user


router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/stats", response_model=ApiResponse[AdminStats], response_model_exclude_unset=True)
async def stats(sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker)):
    with server_errors("Failed to fetch stats"):
        return api_ok(await admin_service.collect_stats(sessionmaker))


@router.get("/users", response_model=ApiResponse[AdminUserList], response_model_exclude_unset=True)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    with server_errors("Failed to fetch users"):
        return api_ok(await admin_service.list_users(db, page=page, limit=limit, search=search))


@router.patch("/users/{user_id}/role", response_model=ApiResponse[RoleChanged], response_model_exclude_unset=True)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    with server_errors("Failed to update role"):
        user = await admin_service.set_role(db, user_id, body.role)
        if user is None:
            raise ApiError(404, NOT_FOUND, "User not found")
        logger.info("Admin %s set role of %s to %s", admin.id, user.id, user.role.value)
        return api_ok(RoleChanged.model_validate(user))
