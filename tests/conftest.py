from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from offmarket import models  # noqa: F401
from offmarket.database import Base, get_db, get_sessionmaker
from offmarket.main import app
from offmarket.models import Notification, Role, User
from offmarket.models.notification import NotificationType
from offmarket.routers.auth import COOKIE_KEY
from offmarket.services.auth import issue_token

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def client(sessionmaker):
    async def _get_db():
        async with sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_sessionmaker] = lambda: sessionmaker
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(db, email, role=Role.USER, name=None, created_at=None):
    user = User(email=email, name=name, role=role)
    if created_at is not None:
        user.created_at = created_at
    db.add(user)
    await db.commit()
    return user


async def make_notification(db, user, minutes=0, is_read=False, title="New buyer interest"):
    notification = Notification(
        user_id=user.id,
        type=NotificationType.NEW_MATCH,
        title=title,
        message="A buyer matches your property's criteria.",
        data={"matchScore": 80},
        is_read=is_read,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(notification)
    await db.commit()
    return notification


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


def sign_in(client, user) -> None:
    client.cookies.set(COOKIE_KEY, issue_token(user))


@pytest_asyncio.fixture
async def alice(db):
    return await make_user(db, "alice@example.com", name="Alice Owner")


@pytest_asyncio.fixture
async def bob(db):
    return await make_user(db, "bob@example.com", name="Bob Buyer")


@pytest_asyncio.fixture
async def admin(db):
    return await make_user(db, "admin@example.com", role=Role.ADMIN, name="Site Admin")
