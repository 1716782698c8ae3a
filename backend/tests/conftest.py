"""Shared fixtures for Setlister tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel.ext.asyncio.session import AsyncSession

import setlister.core.metrics  # noqa: F401  registers the app counters before the baseline
from setlister.app import create_app
from setlister.core.catalog import CatalogSong, SongCatalog
from setlister.core.config import reload_settings
from setlister.core.database import create_database_engine, create_session_factory, create_tables
from setlister.core.matching import reload_matching_config

# Collectors registered at import time (app counters, process/platform collectors)
_BASELINE_COLLECTORS = set(REGISTRY._collector_to_names)


@pytest.fixture(autouse=True)
def reset_prometheus_registry() -> Iterator[None]:
    """Drop collectors added during a test.

    prometheus-fastapi-instrumentator registers its metrics in the global
    registry, so creating the app more than once would otherwise fail with
    duplicate registration errors.
    """
    yield
    for collector in list(REGISTRY._collector_to_names):
        if collector not in _BASELINE_COLLECTORS:
            REGISTRY.unregister(collector)


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point settings at a per-test data directory."""
    data = tmp_path / "data"
    data.mkdir()
    monkeypatch.setenv("SETLISTER_DATA_DIR", str(data))
    monkeypatch.setenv("SETLISTER_ENV", "testing")
    reload_settings()
    reload_matching_config()

    yield data

    monkeypatch.undo()
    reload_settings()
    reload_matching_config()


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Temporary SQLite database with the catalog tables created."""
    engine = create_database_engine(tmp_path / "test.db", echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session bound to the temporary database."""
    session_factory = create_session_factory(db_engine)
    async with session_factory() as session:
        yield session


def sample_value(name: str, labels: dict[str, str] | None = None) -> float:
    """Current value of a Prometheus sample, 0.0 when not yet recorded."""
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class FakeSongCatalog(SongCatalog):
    """In-memory catalog for resolver tests.

    Songs are kept in insertion order, which plays the role of created_at.
    """

    def __init__(self, songs: list[CatalogSong] | None = None) -> None:
        self.songs = list(songs or [])
        self.calls: list[str] = []

    def add(self, title: str, *artists: str, song_id: str | None = None) -> CatalogSong:
        song = CatalogSong(
            id=song_id or f"song-{len(self.songs) + 1:03d}",
            title=title,
            artists=sorted(artists, key=str.lower),
        )
        self.songs.append(song)
        return song

    async def find_exact(self, title: str, limit: int) -> list[CatalogSong]:
        self.calls.append("find_exact")
        return [s for s in self.songs if s.title.lower() == title.lower()][:limit]

    async def find_containing(self, substring: str, limit: int) -> list[CatalogSong]:
        self.calls.append("find_containing")
        return [s for s in self.songs if substring.lower() in s.title.lower()][:limit]

    async def sample(self, limit: int) -> list[CatalogSong]:
        self.calls.append("sample")
        return self.songs[:limit]


class FailingSongCatalog(SongCatalog):
    """Catalog whose every lookup fails."""

    async def find_exact(self, title: str, limit: int) -> list[CatalogSong]:
        raise ConnectionError("catalog unavailable")

    async def find_containing(self, substring: str, limit: int) -> list[CatalogSong]:
        raise ConnectionError("catalog unavailable")

    async def sample(self, limit: int) -> list[CatalogSong]:
        raise ConnectionError("catalog unavailable")


@pytest.fixture
def catalog() -> FakeSongCatalog:
    """Empty in-memory catalog."""
    return FakeSongCatalog()


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client over a fresh app and database, with the lifespan running."""
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client: TestClient) -> TestClient:
    """Test client whose catalog holds a few songs."""
    response = client.post(
        "/api/songs/bulk",
        json={
            "data": "Sugaree, Grateful Dead\n"
            "Tennessee Jed, Grateful Dead\n"
            "Fly Me to the Moon, Frank Sinatra, , C, 2:28, 120"
        },
    )
    assert response.status_code == 200
    assert len(response.json()["added"]) == 3
    return client
