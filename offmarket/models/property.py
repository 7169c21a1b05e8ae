"""Privately registered properties and their matches against wanted ads."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from offmarket.database import Base
from offmarket.models.user import new_id, utcnow


class PropertyType(str, enum.Enum):
    HOUSE = "HOUSE"
    APARTMENT = "APARTMENT"
    TOWNHOUSE = "TOWNHOUSE"
    UNIT = "UNIT"
    LIFESTYLE = "LIFESTYLE"
    SECTION = "SECTION"
    FARM = "FARM"
    COMMERCIAL = "COMMERCIAL"


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("owner_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # ── Location ──
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    suburb: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    region: Mapped[Optional[str]] = mapped_column(String(100))
    postcode: Mapped[Optional[str]] = mapped_column(String(4))

    # ── Attributes ──
    property_type: Mapped[Optional[PropertyType]] = mapped_column(Enum(PropertyType))
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    owner: Mapped["OwnerProfile"] = relationship("OwnerProfile", back_populates="properties")  # noqa: F821


class PropertyMatch(Base):
    __tablename__ = "property_matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    wanted_ad_id: Mapped[str] = mapped_column(
        ForeignKey("wanted_ads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    score: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
