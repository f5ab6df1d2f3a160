"""Pytest configuration and fixtures for docsearch.

Environment is pinned before any docsearch import: SQLite via aiosqlite,
no Redis, no telemetry, and engine URLs that refuse connections. HTTP
tests run the real lifespan and swap the engine clients for in-memory
fakes (tests.fakes) on app.state.
"""

import os
import tempfile

os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{tempfile.gettempdir()}/docsearch-tests.db",
)
os.environ["REDIS_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["SOLR_URL"] = "http://127.0.0.1:9"
os.environ["OPENSEARCH_URL"] = "http://127.0.0.1:9"
os.environ["TYPESENSE_URL"] = "http://127.0.0.1:9"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from docsearch.core.config import get_settings  # noqa: E402
from docsearch.infrastructure.persistence import database  # noqa: E402
from docsearch.infrastructure.persistence import models  # noqa: E402,F401
from tests.fakes import FakeSearchClient, fake_clients  # noqa: E402


@pytest.fixture
async def db_session() -> AsyncSession:
    """Session on a private in-memory SQLite database with tables created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def search_clients() -> dict:
    """Healthy fake engine clients returning no hits; tests mutate them as needed."""
    return fake_clients()


@pytest.fixture
async def app(tmp_path, monkeypatch, search_clients) -> FastAPI:
    """Application with its lifespan running on a per-test SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'docsearch.db'}")
    get_settings.cache_clear()
    await database.dispose_engine()

    from docsearch.main import create_app

    application = create_app()
    async with application.router.lifespan_context(application):
        real_clients = application.state.search_clients
        application.state.search_clients = search_clients
        try:
            yield application
        finally:
            application.state.search_clients = real_clients
    get_settings.cache_clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def failing_engines(search_clients: dict[object, FakeSearchClient]) -> dict:
    """Every engine client raises on search."""
    for fake in search_clients.values():
        fake.fail = True
    return search_clients
