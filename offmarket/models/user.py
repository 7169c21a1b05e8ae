"""Buyers, owners and administrators share one account table."""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from offmarket.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    # ── Identity ──
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    name: Mapped[Optional[str]] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    image: Mapped[Optional[str]] = mapped_column(String(500))
    role: Mapped[Role] = mapped_column(Enum(Role), default=Role.USER, nullable=False)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # ── Relationships ──
    buyer_profile: Mapped[Optional["BuyerProfile"]] = relationship(  # noqa: F821
        "BuyerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    owner_profile: Mapped[Optional["OwnerProfile"]] = relationship(  # noqa: F821
        "OwnerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
