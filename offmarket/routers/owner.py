"""Owner landing page with the inline demand-check widget."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from offmarket.database import get_db
from offmarket.routers.auth import get_session_claims
from offmarket.services.demand import check_demand
from offmarket.utils.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["owner"], include_in_schema=False)

BENEFITS = [
    (
        "100% Private",
        "Your property is never publicly listed. Only you can see the detailed demand data.",
    ),
    (
        "See Real Demand",
        "View actual buyer budgets and requirements. Know what your property is worth to real buyers.",
    ),
    (
        "Connect on Your Terms",
        "Reach out to interested buyers only when you're ready. No pressure, no agents.",
    ),
]

FAQ = [
    (
        "Is my property address publicly visible?",
        "No. Your exact address is never shown to buyers. They can only see anonymized "
        "information about demand in your area until you choose to make contact.",
    ),
    (
        "Do I have to sell if there's interest?",
        "Absolutely not. Registering your property is just for information. You're under "
        "no obligation to contact buyers or sell your property.",
    ),
    (
        "What information can buyers see about me?",
        "Initially, nothing. Buyers only see that there's a property in their target area "
        "that matches their criteria. Your details are only shared if you initiate contact.",
    ),
]


@router.get("/")
async def homepage():
    return RedirectResponse(url="/owner", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/owner", response_class=HTMLResponse)
async def owner_landing(
    request: Request,
    address: Optional[str] = None,
    suburb: Optional[str] = None,
    city: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Render the landing page; a submitted widget form shows its result inline."""
    submitted = any(value is not None for value in (address, suburb, city))
    result = None
    error = None

    if submitted and not address:
        error = "Address is required"
    elif address:
        try:
            result = await check_demand(db, address.strip(), suburb or None, city or None)
        except SQLAlchemyError:
            logger.exception("Failed to check demand for %r", address)
            error = "Failed to check demand"

    return templates.TemplateResponse(
        request,
        "owner.html",
        {
            "signed_in": get_session_claims(request) is not None,
            "benefits": BENEFITS,
            "faq": FAQ,
            "form": {"address": address or "", "suburb": suburb or "", "city": city or ""},
            "result": result,
            "error": error,
        },
    )
