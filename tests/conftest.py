"""
Shared test configuration: in-memory SQLite, app dependency overrides
and helpers for creating members, groups and trips.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from splitledger.main import app
from splitledger.db.session import get_db
from splitledger.db.base import Base
from splitledger.core.jwt_config import create_access_token
from splitledger.core.security import hash_password
from splitledger.models.member import Member

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_member(db_session):
    """Insert a member directly and return (member, auth headers)."""
    # one hash for every fixture member keeps bcrypt out of the hot path
    password_hash = hash_password("password123")

    async def _make(name: str):
        member = Member(
            display_name=name,
            email=f"{name.lower()}@example.com",
            password_hash=password_hash,
        )
        db_session.add(member)
        await db_session.commit()
        await db_session.refresh(member)

        token = create_access_token({"sub": str(member.id)})
        return member, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
async def trip_setup(client, make_member):
    """
    Group with three members (alice owns it) and one trip.

    Returns a dict with the members, their auth headers, group_id and trip_id.
    """
    alice, alice_h = await make_member("Alice")
    bob, bob_h = await make_member("Bob")
    carol, carol_h = await make_member("Carol")

    res = await client.post("/api/v1/groups/", json={"name": "Goa"}, headers=alice_h)
    assert res.status_code == 201
    group_id = res.json()["id"]

    for other in (bob, carol):
        res = await client.post(f"/api/v1/groups/{group_id}/members/{other.id}", headers=alice_h)
        assert res.status_code == 201

    res = await client.post(f"/api/v1/groups/{group_id}/trips", json={"name": "Day 1"}, headers=alice_h)
    assert res.status_code == 201

    return {
        "alice": alice, "bob": bob, "carol": carol,
        "alice_h": alice_h, "bob_h": bob_h, "carol_h": carol_h,
        "group_id": group_id,
        "trip_id": res.json()["id"],
    }
