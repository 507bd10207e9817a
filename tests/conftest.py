"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_EMAILS"] = "boss@example.com"
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret"
os.environ.pop("STRIPE_SECRET_KEY", None)

import uuid
from datetime import datetime, timedelta, timezone
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from nestly.main import app
from nestly.database.connection import engine, AsyncSessionLocal, Base
from nestly.database.table_resolver import clear_table_cache
from nestly.models.user import User
from nestly.models.listing import Listing
from nestly.utils.security import get_password_hash, create_access_token

TEST_PASSWORD = "secret123"
_password_hash = None


def password_hash() -> str:
    """bcrypt is slow; hash the shared test password once"""
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(TEST_PASSWORD)
    return _password_hash


def auth_headers(user: User) -> dict:
    token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": user.role, "type": "user"}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh schema and session for each test"""
    clear_table_cache()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    clear_table_cache()


@pytest_asyncio.fixture(scope="function")
async def client(db_session):
    """Create test HTTP client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def make_user(db_session):
    """Factory: persist a user and return it"""
    async def _make_user(role: str = "USER", email: str = None, name: str = "Test User", **extra) -> User:
        user = User(
            id=str(uuid.uuid4()),
            email=(email or f"user_{uuid.uuid4().hex[:10]}@example.com").lower(),
            password=password_hash(),
            name=name,
            role=role,
            owner_verified=False,
            credits=extra.pop("credits", 0),
            created_at=extra.pop("created_at", datetime.now(timezone.utc)),
            updated_at=datetime.now(timezone.utc),
            **extra
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest_asyncio.fixture(scope="function")
async def make_listing(db_session):
    """Factory: persist a listing; created_at steps back a minute per call so ordering is stable"""
    counter = {"n": 0}
    base_time = datetime.now(timezone.utc)

    async def _make_listing(owner: User, **fields) -> Listing:
        counter["n"] += 1
        owner_id = fields.pop("owner_id", None) or owner.id
        data = {
            "title": f"Listing {counter['n']}",
            "description": "Bright flat",
            "type": "RENT",
            "category": "APARTMENT",
            "price": 1000,
            "currency": "UAH",
            "address": "Khreshchatyk 1, Kyiv",
            "status": "PUBLISHED",
            "images": [],
            "amenities": [],
            "views": 0,
            "created_at": base_time - timedelta(minutes=counter["n"]),
        }
        data.update(fields)
        data.setdefault("updated_at", data["created_at"])

        listing = Listing(id=str(uuid.uuid4()), owner_id=owner_id, **data)
        db_session.add(listing)
        await db_session.commit()
        return listing

    return _make_listing


@pytest_asyncio.fixture(scope="function")
async def regular_user(make_user):
    user = await make_user(role="USER", name="Regular User")
    return user, auth_headers(user)


@pytest_asyncio.fixture(scope="function")
async def owner_user(make_user):
    user = await make_user(role="OWNER", name="Listing Owner")
    return user, auth_headers(user)


@pytest_asyncio.fixture(scope="function")
async def admin_user(make_user):
    user = await make_user(role="ADMIN", name="Site Admin", email="admin@example.com")
    return user, auth_headers(user)


@pytest_asyncio.fixture(scope="function")
async def headers_for():
    """Bearer headers for any persisted user"""
    return auth_headers
