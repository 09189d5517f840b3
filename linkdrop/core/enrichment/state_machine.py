"""
Metadata enrichment state machine.

Guards metadata_status transitions for link records. Every transition is
committed in its own session so pollers observe PROCESSING before the
resolved fields land, and the fields before the terminal state.

Dependencies: sqlalchemy, linkdrop.boundary.db
System role: Per-record enrichment progress tracking
"""

import logging
from typing import Callable, Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from linkdrop.boundary.db.CRUD.file_crud import file_crud
from linkdrop.boundary.db.models.file_model import MetadataStatus
from linkdrop.core.exceptions import InvalidStateTransitionError, LinkNotFoundError

logger = logging.getLogger(__name__)

TransitionListener = Callable[[UUID, MetadataStatus], None]

ALLOWED_TRANSITIONS: dict[MetadataStatus, frozenset[MetadataStatus]] = {
    MetadataStatus.PENDING: frozenset({MetadataStatus.PROCESSING}),
    MetadataStatus.PROCESSING: frozenset({MetadataStatus.COMPLETED, MetadataStatus.FAILED}),
    MetadataStatus.COMPLETED: frozenset(),
    MetadataStatus.FAILED: frozenset(),
}

# States a failed run may be recorded from; a run can fail before PROCESSING lands
FAILURE_SOURCES = frozenset({MetadataStatus.PENDING, MetadataStatus.PROCESSING})


class EnrichmentStateMachine:
    """
    Persisted metadata status transitions.

    Automatic transitions follow ALLOWED_TRANSITIONS. A retry re-enters
    PROCESSING from any state, including a PROCESSING left behind by an
    interrupted run. An aborted run records FAILED from PENDING or
    PROCESSING.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        listeners: Iterable[TransitionListener] | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.listeners: list[TransitionListener] = list(listeners or ())

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a callback invoked after each committed transition."""
        self.listeners.append(listener)

    @staticmethod
    def can_transition(
        current: MetadataStatus | None,
        target: MetadataStatus,
        reentry: bool = False,
        abort: bool = False,
    ) -> bool:
        if reentry and target == MetadataStatus.PROCESSING:
            return True
        if abort and target == MetadataStatus.FAILED:
            return current in FAILURE_SOURCES
        if current is None:
            return False
        return target in ALLOWED_TRANSITIONS[current]

    async def transition(
        self,
        record_id: UUID,
        target: MetadataStatus,
        reentry: bool = False,
        abort: bool = False,
    ) -> MetadataStatus | None:
        """
        Move a record to target and commit.

        Args:
            record_id: Link record UUID
            target: Desired metadata status
            reentry: Allow restarting at PROCESSING (retry path)
            abort: Allow recording FAILED from PENDING (worker failure path)

        Returns:
            MetadataStatus | None: The status the record held before

        Raises:
            LinkNotFoundError: If the record does not exist
            InvalidStateTransitionError: If the move is not permitted
        """
        async with self.session_factory() as session:
            record = await file_crud.get_by_id(session, record_id)
            if record is None:
                raise LinkNotFoundError(str(record_id))

            previous = record.metadata_status
            if not self.can_transition(previous, target, reentry, abort):
                raise InvalidStateTransitionError(
                    str(record_id),
                    previous.value if previous else None,
                    target.value,
                )

            await file_crud.set_metadata_status(session, record_id, target)
            await session.commit()

        logger.info(
            "Metadata status transition",
            extra={
                "record_id": str(record_id),
                "from_status": previous.value if previous else None,
                "to_status": target.value,
            },
        )
        for listener in self.listeners:
            listener(record_id, target)
        return previous
