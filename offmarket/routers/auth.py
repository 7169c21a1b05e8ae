"""
Auth API router — register / login by email, bearer token, current profile.

Endpoints:
    POST  /api/auth/register   → create (or return) the account, issue a token
    POST  /api/auth/login      → issue a token for an existing account
    GET   /api/auth/me         → current profile incl. role (admin gate uses it)
    PATCH /api/auth/me         → update name / phone
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from offmarket.config import settings
from offmarket.database import get_db
from offmarket.schemas.common import ApiResponse
from offmarket.schemas.user import (
    AuthPayload,
    AuthUser,
    LoginRequest,
    MeOut,
    ProfileUpdate,
    RegisterRequest,
    TokenClaims,
)
from offmarket.services import auth as auth_service
from offmarket.utils.api import UNAUTHORIZED, USER_NOT_FOUND, ApiError, api_ok, server_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

COOKIE_KEY = "access_token"

bearer_scheme = HTTPBearer(auto_error=False)


# ═══════════════════════════════════════════════════════════════
#  Credential helpers
# ═══════════════════════════════════════════════════════════════

async def require_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """Decode the bearer token; every protected API route depends on this."""
    if credentials is None:
        raise ApiError(401, UNAUTHORIZED, "Unauthorized")
    try:
        return auth_service.decode_access_token(credentials.credentials)
    except auth_service.InvalidToken:
        raise ApiError(401, UNAUTHORIZED, "Unauthorized")


def get_session_claims(request: Request) -> Optional[TokenClaims]:
    """Claims from the web session cookie, or None for anonymous visitors."""
    token = request.cookies.get(COOKIE_KEY)
    if not token:
        return None
    try:
        return auth_service.decode_access_token(token)
    except auth_service.InvalidToken:
        return None


def set_auth_cookie(response: Response, token: str) -> Response:
    """Attach the JWT cookie to a response."""
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


def _auth_payload(user) -> AuthPayload:
    return AuthPayload(user=AuthUser.model_validate(user), token=auth_service.issue_token(user))


# ═══════════════════════════════════════════════════════════════
#  Routes
# ═══════════════════════════════════════════════════════════════

@router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    response_model_exclude_unset=True,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user, or return the existing one with a fresh token."""
    with server_errors("Failed to register user"):
        user = await auth_service.register_user(db, body.email, body.name)
        return api_ok(_auth_payload(user))


@router.post(
    "/login",
    response_model=ApiResponse[AuthPayload],
    response_model_exclude_unset=True,
)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    with server_errors("Failed to login"):
        user = await auth_service.get_user_by_email(db, body.email)
        if not user:
            raise ApiError(404, USER_NOT_FOUND, "User not found")
        return api_ok(_auth_payload(user))


def _me(user) -> MeOut:
    return MeOut(
        id=user.id,
        email=user.email,
        name=user.name,
        phone=user.phone,
        image=user.image,
        role=user.role,
        has_buyer_profile=user.buyer_profile is not None,
        has_owner_profile=user.owner_profile is not None,
    )


@router.get("/me", response_model=ApiResponse[MeOut], response_model_exclude_unset=True)
async def read_me(
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    """Return the authenticated user's profile."""
    with server_errors("Failed to get user"):
        user = await auth_service.get_user_with_profiles(db, claims.sub)
        if not user:
            raise ApiError(404, USER_NOT_FOUND, "User not found")
        return api_ok(_me(user))


@router.patch("/me", response_model=ApiResponse[MeOut], response_model_exclude_unset=True)
async def update_me(
    body: ProfileUpdate,
    claims: TokenClaims = Depends(require_claims),
    db: AsyncSession = Depends(get_db),
):
    with server_errors("Failed to update profile"):
        user = await auth_service.get_user_with_profiles(db, claims.sub)
        if not user:
            raise ApiError(404, USER_NOT_FOUND, "User not found")
        user = await auth_service.update_profile(db, user, body)
        return api_ok(_me(user))
