"""Property Pydantic schemas."""

from typing import Optional

from offmarket.schemas.common import CamelModel


class DemandResult(CamelModel):
    """Outcome of the anonymous demand check shown on the owner landing page."""
    address: str
    suburb: Optional[str] = None
    city: Optional[str] = None
    buyer_count: int
    has_interest: bool
    message: str
