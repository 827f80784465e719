"""
Test fixtures for Study Dashboard.

Each test gets its own file-based SQLite database. Provides db, user,
client, auth_client and other_client fixtures.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from study_dashboard.db.base import Base
from study_dashboard.db.session import get_db, make_engine, make_sessionmaker
from study_dashboard.main import app
from study_dashboard.models import User


@pytest.fixture
async def engine(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db):
    """A stored user for access-layer tests (password never checked)."""
    user = User(email="ada@example.com", username="ada", hashed_password="not-a-real-hash")
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def client(session_factory):
    """Unauthenticated client bound to the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _register(ac: AsyncClient, email: str, username: str) -> None:
    resp = await ac.post("/api/register", json={
        "email": email,
        "username": username,
        "password": "secret123",
    })
    assert resp.status_code == 201, resp.text


@pytest.fixture
async def auth_client(client):
    """Client logged in as student@example.com."""
    await _register(client, "student@example.com", "student")
    return client


@pytest.fixture
async def other_client(client):
    """A second, separately logged-in user sharing the same database."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        await _register(ac, "other@example.com", "other")
        yield ac
