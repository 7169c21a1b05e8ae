"""Account and token logic shared by the auth API and the web sign-in pages."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from offmarket.config import settings
from offmarket.models.user import User
from offmarket.schemas.user import ProfileUpdate, TokenClaims

logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    """Raised when a bearer credential cannot be decoded into claims."""


def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.id, "email": user.email})


def decode_access_token(token: str) -> TokenClaims:
    """Verify ``token`` and return its claims; a subject is mandatory."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc
    if not payload.get("sub"):
        raise InvalidToken("Token without subject")
    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise InvalidToken(str(exc)) from exc


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, email: str, name: Optional[str] = None) -> User:
    """Return the account for ``email``, creating it on first sign-in."""
    user = await get_user_by_email(db, email)
    if user:
        return user

    user = User(email=email, name=name)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered new user %s", user.id)
    return user


async def get_user_with_profiles(db: AsyncSession, user_id: str) -> Optional[User]:
    """Load a user together with both marketplace profiles in one query."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.buyer_profile), selectinload(User.owner_profile))
        .where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def update_profile(db: AsyncSession, user: User, changes: ProfileUpdate) -> User:
    if changes.name is not None:
        user.name = changes.name
    if changes.phone is not None:
        user.phone = changes.phone
    await db.commit()
    return user


async def lookup_role(db: AsyncSession, claims: TokenClaims) -> Optional[str]:
    """Role of the account behind ``claims``, or None when it no longer exists."""
    user = await db.get(User, claims.sub)
    if user is None:
        return None
    return user.role.value
