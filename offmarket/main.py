"""
OffMarket — FastAPI application entry-point.

Run with:
    uvicorn offmarket.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from offmarket import models  # noqa: F401  (registers every table on Base.metadata)
from offmarket.config import settings
from offmarket.database import Base, engine
from offmarket.utils.api import ApiError, api_error_handler, validation_error_handler

# ── Import routers ──
from offmarket.routers import (
    admin,
    admin_pages,
    auth,
    health,
    notification_pages,
    notifications,
    owner,
    properties,
    signin,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Hidden-demand property marketplace — private listings, buyer demand, notifications.",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware ──
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, https_only=not settings.DEBUG)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

# ── Error envelope ──
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# ── Static files ──
app.mount(
    "/static",
    StaticFiles(directory=str(Path(__file__).resolve().parent / "static")),
    name="static",
)

# ── Register API routers ──
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(notifications.router)
app.include_router(admin.router)
app.include_router(properties.router)

# ── Register page routers ──
app.include_router(signin.router)
app.include_router(admin_pages.router)
app.include_router(notification_pages.router)
app.include_router(owner.router)
