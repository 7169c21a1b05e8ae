"""
Sign-in router — email and Google sign-in for the web pages.

Credential checks and token issuance are delegated: email sign-in goes
through the same register-or-return service as the API, Google sign-in
through authlib's OAuth client. The resulting JWT lands in the
``access_token`` cookie.

Endpoints:
    GET  /auth/signin            → sign-in page
    POST /auth/signin            → email sign-in, redirect to callbackUrl
    GET  /auth/signin/google     → redirect to Google's consent screen
    GET  /auth/callback/google   → handle the OAuth callback
    GET  /auth/signout           → clear the cookie
"""

import logging
from typing import Optional

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from offmarket.config import settings
from offmarket.database import get_db
from offmarket.routers.auth import COOKIE_KEY, set_auth_cookie
from offmarket.schemas.user import RegisterRequest
from offmarket.services import auth as auth_service
from offmarket.utils.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["signin"], include_in_schema=False)

DEFAULT_CALLBACK_URL = "/"
SIGN_IN_FAILED = "Failed to sign in. Please try again."

# ═══════════════════════════════════════════════════════════════
#  OAuth client setup
# ═══════════════════════════════════════════════════════════════

oauth = OAuth()

oauth.register(
    name="google",
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def safe_callback_url(url: Optional[str]) -> str:
    """Only site-relative paths are followed after sign-in."""
    if url and url.startswith("/") and not url.startswith("//") and "\\" not in url:
        return url
    return DEFAULT_CALLBACK_URL


def _render_form(
    request: Request,
    callback_url: str,
    error: Optional[str] = None,
    email: str = "",
    status_code: int = status.HTTP_200_OK,
):
    return templates.TemplateResponse(
        request,
        "auth/signin.html",
        {
            "callback_url": callback_url,
            "error": error,
            "email": email,
            "google_enabled": bool(settings.GOOGLE_CLIENT_ID),
        },
        status_code=status_code,
    )


def _signed_in(callback_url: str, user) -> RedirectResponse:
    response = RedirectResponse(url=callback_url, status_code=status.HTTP_303_SEE_OTHER)
    set_auth_cookie(response, auth_service.issue_token(user))
    return response


# ═══════════════════════════════════════════════════════════════
#  Email sign-in
# ═══════════════════════════════════════════════════════════════

@router.get("/signin", response_class=HTMLResponse)
async def signin_page(request: Request, callbackUrl: Optional[str] = None):
    return _render_form(request, safe_callback_url(callbackUrl))


@router.post("/signin")
async def signin_with_email(
    request: Request,
    email: str = Form(""),
    callback_url: str = Form(DEFAULT_CALLBACK_URL, alias="callbackUrl"),
    db: AsyncSession = Depends(get_db),
):
    callback_url = safe_callback_url(callback_url)
    try:
        body = RegisterRequest(email=email.strip())
    except ValidationError:
        return _render_form(
            request, callback_url, "Please enter a valid email address.", email,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        user = await auth_service.register_user(db, body.email)
    except SQLAlchemyError:
        logger.exception("Email sign-in failed")
        return _render_form(
            request, callback_url, SIGN_IN_FAILED, email,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return _signed_in(callback_url, user)


# ═══════════════════════════════════════════════════════════════
#  Google OAuth flow
# ═══════════════════════════════════════════════════════════════

@router.get("/signin/google")
async def signin_with_google(request: Request, callbackUrl: Optional[str] = None):
    """Redirect the user to Google's OAuth consent screen."""
    callback_url = safe_callback_url(callbackUrl)
    if not settings.GOOGLE_CLIENT_ID:
        return _render_form(
            request, callback_url, "Google sign-in is not available.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    request.session["callback_url"] = callback_url
    client = oauth.create_client("google")
    redirect_uri = request.url_for("google_callback")
    return await client.authorize_redirect(request, str(redirect_uri))


@router.get("/callback/google", name="google_callback")
async def google_callback(request: Request, db: AsyncSession = Depends(get_db)):
    """Find or create the Google user and set the auth cookie."""
    callback_url = safe_callback_url(request.session.pop("callback_url", None))

    try:
        client = oauth.create_client("google")
        token = await client.authorize_access_token(request)
    except OAuthError as exc:
        logger.warning("Google sign-in failed: %s", exc)
        return _render_form(request, callback_url, SIGN_IN_FAILED, status_code=status.HTTP_400_BAD_REQUEST)

    userinfo = token.get("userinfo") or {}
    email = userinfo.get("email")
    if not email:
        return _render_form(
            request, callback_url,
            "Could not retrieve your email from Google. Please sign in with email instead.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        user = await auth_service.register_user(db, email, userinfo.get("name"))
        if not user.image and userinfo.get("picture"):
            user.image = userinfo["picture"]
            await db.commit()
    except SQLAlchemyError:
        logger.exception("Google sign-in failed for %s", email)
        return _render_form(
            request, callback_url, SIGN_IN_FAILED, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return _signed_in(callback_url, user)


# ═══════════════════════════════════════════════════════════════
#  Sign-out
# ═══════════════════════════════════════════════════════════════

@router.get("/signout")
async def signout():
    """Clear the auth cookie and redirect to the landing page."""
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(key=COOKIE_KEY)
    return response
