"""
Link enrichment pipeline.

One run moves a record to PROCESSING, resolves its metadata, fills only
the fields that are still empty, and moves it to COMPLETED. Each step is
committed independently. Failures propagate to the caller (the worker),
which owns the FAILED transition.

Dependencies: sqlalchemy, linkdrop.core.metadata, linkdrop.core.enrichment.state_machine
System role: Asynchronous metadata enrichment for link records
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from linkdrop.boundary.db.CRUD.file_crud import file_crud
from linkdrop.boundary.db.models.file_model import FileModel, MetadataStatus
from linkdrop.core.enrichment.state_machine import EnrichmentStateMachine
from linkdrop.core.exceptions import LinkNotFoundError
from linkdrop.core.metadata import Metadata, MetadataResolver

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "title": "link_title",
    "description": "link_description",
    "thumbnail": "link_thumbnail",
}


@dataclass(frozen=True)
class EnrichmentTask:
    """Unit of work for the enrichment worker."""

    record_id: UUID
    url: str
    reentry: bool = False


def fill_empty_fields(record: FileModel, metadata: Metadata) -> dict[str, str]:
    """
    Select resolved values for record columns that are still empty.

    Args:
        record: Current link record
        metadata: Resolved metadata

    Returns:
        dict[str, str]: Column updates; caller-supplied values are never included
    """
    updates: dict[str, str] = {}
    for field, column in FIELD_MAP.items():
        value = getattr(metadata, field)
        if value and not getattr(record, column):
            updates[column] = value
    return updates


class LinkEnricher:
    """Runs one enrichment pass for a link record."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        resolver: MetadataResolver,
        state_machine: EnrichmentStateMachine,
    ) -> None:
        self.session_factory = session_factory
        self.resolver = resolver
        self.state_machine = state_machine

    async def run(self, task: EnrichmentTask) -> None:
        """
        Enrich a single record.

        Args:
            task: Record id, URL and whether this is a retry re-entry

        Raises:
            LinkNotFoundError: If the record vanished
            InvalidStateTransitionError: If the record is not in an enrichable state
        """
        await self.state_machine.transition(
            task.record_id, MetadataStatus.PROCESSING, reentry=task.reentry
        )

        metadata = await self.resolver.resolve(task.url)

        async with self.session_factory() as session:
            record = await file_crud.get_by_id(session, task.record_id)
            if record is None:
                raise LinkNotFoundError(str(task.record_id))

            updates = fill_empty_fields(record, metadata)
            if updates:
                await file_crud.update_link_metadata(session, task.record_id, **updates)
                await session.commit()

        logger.info(
            "Link metadata merged",
            extra={
                "record_id": str(task.record_id),
                "updated_fields": sorted(updates),
            },
        )

        await self.state_machine.transition(task.record_id, MetadataStatus.COMPLETED)
