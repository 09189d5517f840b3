"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite-backed session factory, link record builders, a scripted
metadata resolver, and a wired enrichment pipeline.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from linkdrop.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from linkdrop.boundary.db.models.file_model import FileModel, FileStatus, MetadataStatus
from linkdrop.configs import DatabaseSettings
from linkdrop.core.enrichment import EnrichmentStateMachine, EnrichmentWorker, LinkEnricher
from linkdrop.core.metadata import Metadata


class FakeResolver:
    """
    Scripted stand-in for MetadataResolver.

    Attributes:
        metadata: Value returned by resolve()
        error: Exception raised by resolve() when set
        gate: Optional event resolve() waits on before returning
        calls: URLs resolve() was called with
    """

    def __init__(self, metadata: Metadata | None = None) -> None:
        self.metadata = metadata or Metadata()
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.calls: list[str] = []

    async def resolve(self, url: str) -> Metadata:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.metadata


def build_record(**overrides) -> FileModel:
    """Build an unsaved link FileModel with every column populated."""
    now = datetime.now(timezone.utc)
    url = overrides.pop("link_url", "https://example.com/post/1")
    fields = {
        "id": uuid.uuid4(),
        "short_code": "ABC123",
        "original_name": url or "notes.pdf",
        "mime_type": "text/url",
        "size": len(url or ""),
        "filename": "link-example.com--post-1-1700000000000",
        "uploader_ip": "127.0.0.1",
        "status": FileStatus.ACTIVE,
        "categories": ["reading"],
        "tags": [],
        "description": None,
        "is_link": True,
        "link_url": url,
        "link_title": None,
        "link_description": None,
        "link_thumbnail": None,
        "metadata_status": MetadataStatus.PENDING,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return FileModel(**fields)


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    """File-backed SQLite settings; each test gets its own database."""
    return DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'linkdrop.db'}")


@pytest.fixture
async def session_factory(db_settings):
    """
    Create SQLite async database with tables for testing.

    Yields:
        async_sessionmaker: Session factory bound to the test database
    """
    engine = get_async_engine(db_settings)
    await create_tables(engine)

    yield get_async_session_factory(engine)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    """Yield a session from the test database."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def insert_record(session_factory):
    """Persist a FileModel built from overrides and return it."""

    async def _insert(**overrides) -> FileModel:
        record = build_record(**overrides)
        async with session_factory() as session:
            session.add(record)
            await session.commit()
        return record

    return _insert


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver(Metadata(title="Resolved title", description="Resolved description"))


@pytest.fixture
def status_history() -> list:
    return []


@pytest.fixture
def state_machine(session_factory, status_history) -> EnrichmentStateMachine:
    """State machine recording (record_id, status) for every committed transition."""
    return EnrichmentStateMachine(
        session_factory,
        listeners=[lambda record_id, status: status_history.append((record_id, status))],
    )


@pytest.fixture
async def worker(session_factory, fake_resolver, state_machine):
    """
    Running enrichment worker wired to the fake resolver.

    Yields:
        EnrichmentWorker: Started worker, stopped after the test
    """
    enricher = LinkEnricher(session_factory, fake_resolver, state_machine)
    enrichment_worker = EnrichmentWorker(enricher, state_machine, concurrency=2)
    enrichment_worker.start()

    yield enrichment_worker

    await enrichment_worker.stop()


@pytest.fixture
def make_record():
    """Expose build_record to tests that need unsaved records."""
    return build_record


@pytest.fixture
def resolver_factory():
    """Expose FakeResolver to tests that script their own resolver."""
    return FakeResolver
