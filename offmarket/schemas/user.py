"""User and auth Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from offmarket.models.user import Role
from offmarket.schemas.common import CamelModel


class RegisterRequest(BaseModel):
    """Body of POST /api/auth/register (also used by the sign-in form)."""
    email: EmailStr
    name: Optional[str] = Field(default=None, min_length=2)


class LoginRequest(BaseModel):
    email: EmailStr


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)


class TokenClaims(BaseModel):
    """Validated bearer credential, passed explicitly through request scope."""
    sub: str
    email: Optional[str] = None
    exp: Optional[int] = None


class AuthUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: Role


class AuthPayload(CamelModel):
    user: AuthUser
    token: str


class MeOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    image: Optional[str] = None
    role: Role
    has_buyer_profile: bool
    has_owner_profile: bool


class RecentUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    role: Role


class AdminUser(RecentUser):
    is_buyer: bool
    is_owner: bool


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class AdminUserList(CamelModel):
    users: List[AdminUser]
    pagination: Pagination


class RoleUpdate(BaseModel):
    role: Role


class RoleChanged(CamelModel):
    id: str
    email: str
    role: Role
