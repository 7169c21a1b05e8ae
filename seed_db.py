import asyncio

from offmarket import models  # noqa: F401
from offmarket.database import Base, async_session, engine
from offmarket.models import (
    BuyerProfile,
    OwnerProfile,
    Property,
    PropertyMatch,
    Role,
    TargetAddress,
    TargetLocation,
    User,
    WantedAd,
)
from offmarket.models.notification import NotificationType
from offmarket.models.property import PropertyType
from offmarket.models.wanted_ad import LocationType
from offmarket.services.notifications import create_notification


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        # Create users
        admin = User(email="admin@offmarket.nz", name="Site Admin", role=Role.ADMIN)
        owner = User(email="olivia@example.com", name="Olivia Owner")
        buyer = User(email="ben@example.com", name="Ben Buyer")
        buyer2 = User(email="bella@example.com", name="Bella Buyer")
        session.add_all([admin, owner, buyer, buyer2])
        await session.flush()

        # Profiles
        owner_profile = OwnerProfile(user_id=owner.id)
        buyer_profile = BuyerProfile(user_id=buyer.id)
        buyer2_profile = BuyerProfile(user_id=buyer2.id)
        session.add_all([owner_profile, buyer_profile, buyer2_profile])
        await session.flush()

        # A privately registered property
        prop = Property(
            owner_id=owner_profile.id,
            address="12 Queen Street",
            suburb="Ponsonby",
            city="Auckland",
            region="Auckland",
            postcode="1011",
            property_type=PropertyType.HOUSE,
            bedrooms=3,
            bathrooms=2,
        )
        session.add(prop)

        # Wanted ads: one by area, one by exact address
        area_ad = WantedAd(buyer_id=buyer_profile.id, title="Family home in Ponsonby", budget=1_450_000)
        area_ad.target_locations.append(TargetLocation(location_type=LocationType.SUBURB, name="Ponsonby"))
        address_ad = WantedAd(buyer_id=buyer2_profile.id, title="Queen Street villa", budget=1_600_000)
        address_ad.target_addresses.append(
            TargetAddress(address="12 Queen Street", suburb="Ponsonby", city="Auckland")
        )
        session.add_all([area_ad, address_ad])
        await session.flush()

        session.add_all([
            PropertyMatch(property_id=prop.id, wanted_ad_id=area_ad.id, score=82.5),
            PropertyMatch(property_id=prop.id, wanted_ad_id=address_ad.id, score=100.0),
        ])
        await session.commit()

        # Notifications for the owner
        await create_notification(
            session, owner.id, NotificationType.NEW_MATCH,
            "New buyer interest",
            'A buyer specifically listed your property address in their wanted ad "Queen Street villa".',
            {"propertyId": prop.id, "wantedAdId": address_ad.id, "matchScore": 100.0},
        )
        await create_notification(
            session, owner.id, NotificationType.NEW_MATCH,
            "New buyer interest",
            'A buyer searching for "Family home in Ponsonby" matches your property\'s criteria.',
            {"propertyId": prop.id, "wantedAdId": area_ad.id, "matchScore": 82.5},
        )
        await create_notification(
            session, owner.id, NotificationType.SYSTEM,
            "Welcome to OffMarket",
            "Your property is registered privately. We'll let you know when buyers match it.",
        )

    await engine.dispose()
    print("Database seeded with demo users, a property, wanted ads and notifications.")


if __name__ == "__main__":
    asyncio.run(async_main())
