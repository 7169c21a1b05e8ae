"""Anonymous demand check behind the owner landing page widget."""

from typing import Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from offmarket.models.wanted_ad import LocationType, TargetAddress, TargetLocation, WantedAd
from offmarket.schemas.property import DemandResult


def _iequals(column, value: str):
    return func.lower(column) == value.lower()


async def check_demand(
    db: AsyncSession,
    address: str,
    suburb: Optional[str] = None,
    city: Optional[str] = None,
) -> DemandResult:
    """Count active wanted ads that target this address or its suburb / city."""
    address_match = [TargetAddress.address.icontains(address, autoescape=True)]
    location_match = []
    if suburb:
        address_match.append(_iequals(TargetAddress.suburb, suburb))
        location_match.append(
            and_(_iequals(TargetLocation.name, suburb), TargetLocation.location_type == LocationType.SUBURB)
        )
    if city:
        address_match.append(_iequals(TargetAddress.city, city))
        location_match.append(
            and_(_iequals(TargetLocation.name, city), TargetLocation.location_type == LocationType.CITY)
        )

    targets = [WantedAd.target_addresses.any(or_(*address_match))]
    if location_match:
        targets.append(WantedAd.target_locations.any(or_(*location_match)))

    buyer_count = (
        await db.scalar(
            select(func.count(WantedAd.id)).where(WantedAd.is_active == True, or_(*targets))  # noqa: E712
        )
    ) or 0

    if buyer_count > 0:
        plural = "s" if buyer_count > 1 else ""
        message = f"{buyer_count} buyer{plural} interested in this area"
    else:
        message = "No current buyers registered for this area"

    return DemandResult(
        address=address,
        suburb=suburb,
        city=city,
        buyer_count=buyer_count,
        has_interest=buyer_count > 0,
        message=message,
    )
