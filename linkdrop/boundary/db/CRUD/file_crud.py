"""
File CRUD operations.

Provides Create, Read, Update operations for FileModel with link-specific
queries: short-code lookup, metadata status updates, and search.

Dependencies: sqlalchemy, linkdrop.boundary.db.models
System role: File and link persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkdrop.boundary.db.base import utcnow
from linkdrop.boundary.db.CRUD.base_crud import BaseCRUD
from linkdrop.boundary.db.models.file_model import FileModel, FileStatus, MetadataStatus


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FileCRUD(BaseCRUD[FileModel]):
    """
    CRUD operations for FileModel.

    Extends BaseCRUD with short-code queries, link visibility filters,
    and partial updates that always advance updated_at.
    """

    def __init__(self) -> None:
        """Initialize FileCRUD with FileModel."""
        super().__init__(FileModel)

    async def short_code_exists(self, session: AsyncSession, short_code: str) -> bool:
        """
        Check whether a short code is already taken by any file or link.

        Deleted records keep their code reserved.

        Args:
            session: Async database session
            short_code: Candidate short code

        Returns:
            True if a record already uses the code
        """
        stmt = select(FileModel.id).where(FileModel.short_code == short_code).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_by_short_code(
        self,
        session: AsyncSession,
        short_code: str,
    ) -> FileModel | None:
        """
        Retrieve a visible record by short code.

        Args:
            session: Async database session
            short_code: Normalized short code

        Returns:
            FileModel if found and not deleted, None otherwise
        """
        stmt = select(FileModel).where(
            FileModel.short_code == short_code,
            FileModel.status != FileStatus.DELETED,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_link(self, session: AsyncSession, id: UUID) -> FileModel | None:
        """
        Retrieve a visible link record by primary key.

        Args:
            session: Async database session
            id: Record UUID

        Returns:
            FileModel if it exists, is a link, and is not deleted; None otherwise
        """
        stmt = select(FileModel).where(
            FileModel.id == id,
            FileModel.is_link.is_(True),
            FileModel.status != FileStatus.DELETED,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def search_links(
        self,
        session: AsyncSession,
        query: str,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[FileModel], int]:
        """
        Case-insensitive substring search over link url, title, description and tags.

        An empty query matches every visible link.

        Args:
            session: Async database session
            query: Search text (matched literally)
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (page of FileModels newest first, total match count)
        """
        filters = [
            FileModel.is_link.is_(True),
            FileModel.status != FileStatus.DELETED,
        ]
        if query:
            pattern = f"%{escape_like(query)}%"
            filters.append(
                or_(
                    FileModel.link_url.ilike(pattern, escape="\\"),
                    FileModel.link_title.ilike(pattern, escape="\\"),
                    FileModel.link_description.ilike(pattern, escape="\\"),
                    self._tag_matches(session, pattern),
                )
            )

        stmt = (
            select(FileModel)
            .where(*filters)
            .order_by(FileModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(FileModel).where(*filters)

        records = (await session.execute(stmt)).scalars().all()
        total = (await session.execute(count_stmt)).scalar_one()
        return records, total

    @staticmethod
    def _tag_matches(session: AsyncSession, pattern: str):
        """
        EXISTS clause matching pattern against each tag individually.

        Tags are stored as a JSON array, so the array is expanded per row
        (json_array_elements_text on PostgreSQL, json_each elsewhere) and
        every element is compared on its own.
        """
        if session.get_bind().dialect.name == "postgresql":
            elements = func.json_array_elements_text(FileModel.tags)
        else:
            elements = func.json_each(FileModel.tags)
        tag = elements.table_valued("value").alias("tag")
        return (
            select(tag.c.value)
            .where(tag.c.value.ilike(pattern, escape="\\"))
            .exists()
        )

    async def update_link_metadata(
        self,
        session: AsyncSession,
        id: UUID,
        **fields,
    ) -> FileModel | None:
        """
        Write resolved metadata fields onto a link.

        Args:
            session: Async database session
            id: Record UUID
            **fields: Subset of link_title, link_description, link_thumbnail

        Returns:
            Updated FileModel if found, None otherwise
        """
        return await self.update_by_id(session, id, updated_at=utcnow(), **fields)

    async def set_metadata_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: MetadataStatus,
    ) -> FileModel | None:
        """
        Persist a metadata status transition.

        Args:
            session: Async database session
            id: Record UUID
            status: New metadata status

        Returns:
            Updated FileModel if found, None otherwise
        """
        return await self.update_by_id(session, id, metadata_status=status, updated_at=utcnow())

    async def soft_delete(self, session: AsyncSession, id: UUID) -> bool:
        """
        Mark a record as deleted without removing the row.

        Args:
            session: Async database session
            id: Record UUID

        Returns:
            True if a visible record was deleted, False if not found
        """
        record = await self.get_by_id(session, id)
        if record is None or record.status == FileStatus.DELETED:
            return False
        await self.update_by_id(session, id, status=FileStatus.DELETED, updated_at=utcnow())
        return True


file_crud = FileCRUD()
