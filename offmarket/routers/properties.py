"""Public demand check used by the owner lead widget."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from offmarket.database import get_db
from offmarket.schemas.common import ApiResponse
from offmarket.schemas.property import DemandResult
from offmarket.services.demand import check_demand
from offmarket.utils.api import VALIDATION_ERROR, ApiError, api_ok, server_errors

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.get("/check-demand", response_model=ApiResponse[DemandResult], response_model_exclude_unset=True)
async def check_property_demand(
    address: Optional[str] = None,
    suburb: Optional[str] = None,
    city: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """How many active buyers are looking for a property like this one (public)."""
    if not address:
        raise ApiError(400, VALIDATION_ERROR, "Address is required")

    with server_errors("Failed to check demand"):
        return api_ok(await check_demand(db, address, suburb or None, city or None))
