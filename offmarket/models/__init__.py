"""
OffMarket – SQLAlchemy ORM models package.

Imports all model classes so the metadata and the app can discover them
through a single ``from offmarket.models import *`` import.
"""

from offmarket.models.user import Role, User                     # noqa: F401
from offmarket.models.profile import BuyerProfile, OwnerProfile  # noqa: F401
from offmarket.models.property import Property, PropertyMatch    # noqa: F401
from offmarket.models.wanted_ad import (                          # noqa: F401
    TargetAddress,
    TargetLocation,
    WantedAd,
)
from offmarket.models.inquiry import Inquiry                     # noqa: F401
from offmarket.models.notification import Notification           # noqa: F401
