"""
Dependency injection container.

AppContainer holds every long-lived component and is built once in the
application lifespan. FastAPI dependencies read it from app.state, so no
component is created lazily on first request.

Dependencies: fastapi, sqlalchemy, linkdrop.configs, linkdrop.core, linkdrop.application
System role: DI container for service injection
"""

from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from linkdrop.application.services.link_service import LinkService
from linkdrop.boundary.db.connection import get_async_engine, get_async_session_factory
from linkdrop.configs import Settings
from linkdrop.core.enrichment import EnrichmentStateMachine, EnrichmentWorker, LinkEnricher
from linkdrop.core.metadata import MetadataResolver, ProviderFetcher, build_providers
from linkdrop.core.short_code import ShortCodeAllocator


@dataclass
class AppContainer:
    """Process-wide components wired together at startup."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    allocator: ShortCodeAllocator
    resolver: MetadataResolver
    state_machine: EnrichmentStateMachine
    enricher: LinkEnricher
    worker: EnrichmentWorker


def build_container(settings: Settings) -> AppContainer:
    """
    Construct all components from settings.

    Args:
        settings: Application settings

    Returns:
        AppContainer: Wired components; the worker is not started yet
    """
    engine = get_async_engine(settings.database)
    session_factory = get_async_session_factory(engine)

    fetcher = ProviderFetcher(
        headers=settings.metadata.request_headers,
        timeout_seconds=settings.metadata.timeout_seconds,
        max_content_length=settings.metadata.max_content_length,
    )
    resolver = MetadataResolver(
        build_providers(settings.metadata),
        fetcher,
        allow_private_targets=settings.metadata.allow_private_targets,
    )
    state_machine = EnrichmentStateMachine(session_factory)
    enricher = LinkEnricher(session_factory, resolver, state_machine)
    worker = EnrichmentWorker(
        enricher,
        state_machine,
        concurrency=settings.metadata.worker_concurrency,
    )

    return AppContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        allocator=ShortCodeAllocator(),
        resolver=resolver,
        state_machine=state_machine,
        enricher=enricher,
        worker=worker,
    )


def get_container(request: Request) -> AppContainer:
    """Return the container built during application startup."""
    return request.app.state.container


def get_settings_dependency(container: AppContainer = Depends(get_container)) -> Settings:
    """Get settings the application was started with."""
    return container.settings


async def get_db_session(
    container: AppContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for a request-scoped async database session.

    Yields:
        AsyncSession: Session closed after the route completes
    """
    async with container.session_factory() as session:
        yield session


def get_link_service(
    db: AsyncSession = Depends(get_db_session),
    container: AppContainer = Depends(get_container),
) -> LinkService:
    """
    Get link service instance.

    Args:
        db: Async database session (injected via Depends)
        container: Application container (injected via Depends)

    Returns:
        LinkService: Link service bound to this request's session
    """
    return LinkService(db=db, allocator=container.allocator, worker=container.worker)
