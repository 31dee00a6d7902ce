"""
Leisure Catalog API — Startup Health Check Tests
=================================================

What:  Tests for the lifespan ping and the `run()` entry point.

What we test:
    ✅ Reachable database: lifespan yields (Serving)
    ✅ Unreachable database: StartupError before yielding (Terminated)
    ✅ run() exits non-zero and never listens when the ping fails
"""

import socket

import pytest

from leisure import main
from leisure.config import Settings
from leisure.database import Database
from leisure.exceptions import StartupError
from leisure.main import check_database, create_app, lifespan


def make_settings():
    return Settings(_env_file=None, database_url="sqlite+aiosqlite:///unused.db", log_level="WARNING")


class TestCheckDatabase:

    @pytest.mark.asyncio
    async def test_reachable_database_passes(self, database):
        await check_database(database)

        assert database.checked_out() == 0

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_startup_error(self, unreachable_database):
        with pytest.raises(StartupError) as exc_info:
            await check_database(unreachable_database)

        assert exc_info.value.context["type"] == "OperationalError"
        assert unreachable_database.checked_out() == 0


class TestLifespan:

    @pytest.mark.asyncio
    async def test_serves_after_successful_ping(self, database):
        app = create_app(settings=make_settings(), database=database)
        served = False

        async with lifespan(app):
            served = True
            assert database.checked_out() == 0

        assert served

    @pytest.mark.asyncio
    async def test_never_serves_when_ping_fails(self, unreachable_database):
        app = create_app(settings=make_settings(), database=unreachable_database)
        served = False

        with pytest.raises(StartupError):
            async with lifespan(app):
                served = True

        assert not served


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestRun:
    """Real uvicorn, real socket: only the database is out of reach."""

    def test_exits_non_zero_without_listening(self, tmp_path):
        port = free_port()
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'leisure.db'}",
            host="127.0.0.1",
            port=port,
            log_level="WARNING",
        )
        application = create_app(settings=settings, database=Database.from_settings(settings))

        with pytest.raises(SystemExit) as exc_info:
            main.run(application)

        assert exc_info.value.code not in (0, None)
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(1)
            assert sock.connect_ex(("127.0.0.1", port)) != 0
