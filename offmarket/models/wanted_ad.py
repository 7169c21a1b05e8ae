"""A buyer's demand criteria, targeting areas or exact addresses."""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from offmarket.database import Base
from offmarket.models.user import new_id, utcnow


class LocationType(str, enum.Enum):
    SUBURB = "SUBURB"
    CITY = "CITY"
    DISTRICT = "DISTRICT"
    REGION = "REGION"


class WantedAd(Base):
    __tablename__ = "wanted_ads"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    buyer_id: Mapped[str] = mapped_column(
        ForeignKey("buyer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    budget: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    buyer: Mapped["BuyerProfile"] = relationship("BuyerProfile", back_populates="wanted_ads")  # noqa: F821
    target_locations: Mapped[List["TargetLocation"]] = relationship(
        back_populates="wanted_ad", cascade="all, delete-orphan"
    )
    target_addresses: Mapped[List["TargetAddress"]] = relationship(
        back_populates="wanted_ad", cascade="all, delete-orphan"
    )


class TargetLocation(Base):
    __tablename__ = "target_locations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    wanted_ad_id: Mapped[str] = mapped_column(
        ForeignKey("wanted_ads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_type: Mapped[LocationType] = mapped_column(Enum(LocationType), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    wanted_ad: Mapped[WantedAd] = relationship(back_populates="target_locations")


class TargetAddress(Base):
    __tablename__ = "target_addresses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    wanted_ad_id: Mapped[str] = mapped_column(
        ForeignKey("wanted_ads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    suburb: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(100))

    wanted_ad: Mapped[WantedAd] = relationship(back_populates="target_addresses")
