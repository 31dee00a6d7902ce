"""
Leisure Catalog API — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Catalog tests run against a real SQLite file (sqlite+aiosqlite) seeded
       with the genres/tv_shows tables, so every SQL statement is executed
       for real. Service unit tests use AsyncMock connections.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database: Seeded Database (pool of 4) on a temporary SQLite file
    ├── unreachable_database: Database whose file can never be opened
    ├── mock_conn: AsyncMock standing in for an AsyncConnection
    └── test_client: HTTPX AsyncClient bound to an app using `database`
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
# Why: leisure.main builds its module-level app from the environment
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="leisure_test_"), "unused.db")
)
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from leisure.database import Database


SEED_GENRES = [
    {"tvid": "t1", "genre": "Drama"},
    {"tvid": "t2", "genre": "Comedy"},
    {"tvid": "t3", "genre": "Drama"},
]

SEED_SHOWS = [
    {"tvid": "t1", "name": "Succession", "lang": "English", "rating": 8.9, "premiered": "2018-06-03"},
    {"tvid": "t2", "name": "The Office", "lang": "English", "rating": 8.6, "premiered": "2005-03-24"},
    {"tvid": "t3", "name": "Breaking Bad", "lang": "English", "rating": 9.5, "premiered": "2008-01-20"},
]


async def seed(database: Database) -> None:
    async with database.connection() as conn:
        await conn.execute(text("CREATE TABLE genres (tvid TEXT NOT NULL, genre TEXT)"))
        await conn.execute(text(
            "CREATE TABLE tv_shows ("
            " tvid TEXT PRIMARY KEY, name TEXT NOT NULL,"
            " lang TEXT, rating REAL, premiered TEXT)"
        ))
        await conn.execute(
            text("INSERT INTO genres (tvid, genre) VALUES (:tvid, :genre)"), SEED_GENRES
        )
        await conn.execute(
            text(
                "INSERT INTO tv_shows (tvid, name, lang, rating, premiered)"
                " VALUES (:tvid, :name, :lang, :rating, :premiered)"
            ),
            SEED_SHOWS,
        )


@pytest_asyncio.fixture
async def database(tmp_path):
    """
    Provides a seeded Database on a throwaway SQLite file.

    Seed:
        genres:   (t1, Drama), (t2, Comedy), (t3, Drama)
        tv_shows: t1 Succession, t2 The Office, t3 Breaking Bad
    """
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'leisure.db'}")
    await seed(db)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def unreachable_database(tmp_path):
    """A Database pointing at a directory that does not exist."""
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'leisure.db'}")
    yield db
    await db.dispose()


@pytest.fixture
def mock_conn():
    """
    Provides a mock async connection.

    Usage:
        mock_conn.execute.return_value = make_result(scalars=["Drama"])
    """
    conn = AsyncMock()
    conn.execute = AsyncMock()
    return conn


@pytest.fixture
def make_result():
    """
    Factory for MagicMocks shaped like a SQLAlchemy CursorResult.

    Usage:
        mock_conn.execute.return_value = make_result(scalars=["Comedy", "Drama"])
        mock_conn.execute.return_value = make_result(rows=[{"tvid": "t2", "name": "The Office"}])
    """
    def _make(scalars=None, rows=None):
        result = MagicMock()
        result.scalars.return_value.all.return_value = list(scalars or [])
        mapped = [dict(row) for row in (rows or [])]
        result.mappings.return_value.all.return_value = mapped
        result.mappings.return_value.first.return_value = mapped[0] if mapped else None
        return result
    return _make


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    The app is built around the seeded `database` fixture. ASGITransport
    does not run the lifespan, so no startup ping happens here.
    """
    from leisure.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
