"""Buyer and owner profiles, the two sides of the marketplace."""

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from offmarket.database import Base
from offmarket.models.user import new_id, utcnow


class BuyerProfile(Base):
    __tablename__ = "buyer_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="buyer_profile")  # noqa: F821
    wanted_ads: Mapped[List["WantedAd"]] = relationship(  # noqa: F821
        "WantedAd", back_populates="buyer", cascade="all, delete-orphan"
    )


class OwnerProfile(Base):
    __tablename__ = "owner_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="owner_profile")  # noqa: F821
    properties: Mapped[List["Property"]] = relationship(  # noqa: F821
        "Property", back_populates="owner", cascade="all, delete-orphan"
    )
