"""
Link service orchestrator.

Coordinates link submission, enrichment dispatch, retry, status polling,
search and soft deletion. Submission persists and commits the record,
queues enrichment, and returns without waiting on the network.

Dependencies: sqlalchemy, linkdrop.boundary.db.CRUD, linkdrop.core
System role: Link use case orchestration
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Sequence
from urllib.parse import urlsplit
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from linkdrop.boundary.db.CRUD.file_crud import file_crud
from linkdrop.boundary.db.models.file_model import (
    MAX_TEXT_LENGTH,
    FileModel,
    FileStatus,
    MetadataStatus,
)
from linkdrop.core.enrichment import EnrichmentTask, EnrichmentWorker
from linkdrop.core.exceptions import (
    AllocationExhaustedError,
    InvalidUrlError,
    LinkDropException,
    LinkNotFoundError,
    MissingCategoriesError,
    ValidationError,
)
from linkdrop.core.short_code import ShortCodeAllocator
from linkdrop.models.link import LinkInput
from linkdrop.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

LINK_MIME_TYPE = "text/url"
FILENAME_PATH_LENGTH = 200


def validate_url(url: str) -> str:
    """
    Validate that url is an absolute http(s) URL.

    Args:
        url: Raw caller input

    Returns:
        str: The stripped URL

    Raises:
        InvalidUrlError: If the scheme is not http/https, the host is missing,
            or the URL is longer than the stored column
    """
    candidate = (url or "").strip()
    if len(candidate) > MAX_TEXT_LENGTH:
        raise InvalidUrlError(candidate[:100])
    try:
        parts = urlsplit(candidate)
    except ValueError as e:
        raise InvalidUrlError(candidate) from e
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(candidate)
    return candidate


def generate_link_filename(url: str) -> str:
    """Build the synthetic stored filename: link-<host>-<path>-<epoch ms>."""
    timestamp = int(time.time() * 1000)
    parts = urlsplit(url)
    if not parts.hostname:
        return f"link-{timestamp}"
    path = re.sub(r"[^a-zA-Z0-9]", "-", parts.path)[:FILENAME_PATH_LENGTH]
    return f"link-{parts.hostname}-{path}-{timestamp}"


@dataclass
class BatchResult:
    """Outcome of a batch submission; per-item failures do not abort the batch."""

    files: list[FileModel] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class LinkService:
    """Link service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        allocator: ShortCodeAllocator,
        worker: EnrichmentWorker,
    ) -> None:
        """
        Initialize link service.

        Args:
            db: Async SQLAlchemy session for the current request
            allocator: Short code allocator
            worker: Enrichment worker receiving queued tasks
        """
        self.db = db
        self.allocator = allocator
        self.worker = worker

    async def submit_one(
        self,
        url: str,
        categories: list[str],
        tags: list[str] | None = None,
        title: str | None = None,
        description: str | None = None,
        thumbnail: str | None = None,
        uploader_ip: str = "unknown",
    ) -> FileModel:
        """
        Persist a link with PENDING metadata and queue its enrichment.

        Args:
            url: Link target (http/https)
            categories: Non-empty category list
            tags: Optional tags
            title: Caller title, takes precedence over resolved metadata
            description: Caller description, takes precedence over resolved metadata
            thumbnail: Caller thumbnail, takes precedence over resolved metadata
            uploader_ip: Originating address for audit

        Returns:
            FileModel: Committed record, visible to readers before enrichment runs

        Raises:
            InvalidUrlError: If url is not http/https
            MissingCategoriesError: If categories is empty
            AllocationExhaustedError: If no short code could be allocated
        """
        fields = self._build_fields(url, categories, tags, title, description, thumbnail, uploader_ip)
        code = await self.allocator.allocate(self.db)
        record = await self._insert(code, fields, reserved=set())
        self._dispatch(record)
        return record

    async def submit_batch(
        self,
        items: Sequence[LinkInput],
        categories: list[str] | None = None,
        tags: list[str] | None = None,
        uploader_ip: str = "unknown",
    ) -> BatchResult:
        """
        Submit several links independently.

        Global categories and tags are prepended to each item's own lists
        (duplicates kept). Invalid items are reported in errors keyed by
        their URL and do not stop the remaining items.

        Args:
            items: Links to submit
            categories: Categories applied to every item
            tags: Tags applied to every item
            uploader_ip: Originating address for audit

        Returns:
            BatchResult: Created records and per-item errors
        """
        result = BatchResult()
        prepared: list[tuple[str, dict]] = []

        for item in items:
            try:
                fields = self._build_fields(
                    item.url,
                    [*(categories or []), *item.categories],
                    [*(tags or []), *item.tags],
                    item.title,
                    item.description,
                    item.thumbnail,
                    uploader_ip,
                )
            except ValidationError as e:
                result.errors.append({"url": item.url, "error": e.message})
                logger.warning(
                    "Link rejected in batch",
                    extra={"url": item.url, "error": e.message},
                )
                continue
            prepared.append((item.url, fields))

        codes = await self.allocator.allocate_batch(self.db, len(prepared))
        reserved = set(codes)

        for (url, fields), code in zip(prepared, codes):
            try:
                record = await self._insert(code, fields, reserved)
            except LinkDropException as e:
                result.errors.append({"url": url, "error": e.message})
                logger.warning("Link insert failed in batch", extra={"url": url, "error": e.message})
                continue
            except SQLAlchemyError as e:
                await self.db.rollback()
                result.errors.append({"url": url, "error": "Failed to save link"})
                log_exception_with_context(logger, "Link insert failed in batch", e, url=url)
                continue
            result.files.append(record)
            self._dispatch(record)

        logger.info(
            "Batch link upload finished",
            extra={
                "total_links": len(items),
                "success_count": len(result.files),
                "error_count": len(result.errors),
            },
        )
        return result

    async def retry(self, record_id: UUID) -> FileModel:
        """
        Queue a fresh enrichment run that restarts at PROCESSING.

        Args:
            record_id: Link record UUID

        Returns:
            FileModel: The link record

        Raises:
            LinkNotFoundError: If missing, deleted, or not a link
        """
        record = await self._get_link_or_raise(record_id)
        self.worker.enqueue(EnrichmentTask(record.id, record.link_url, reentry=True))
        logger.info(
            "Metadata retry queued",
            extra={"record_id": str(record.id), "previous_status": str(record.metadata_status)},
        )
        return record

    async def get_status(self, record_id: UUID) -> dict:
        """
        Get the metadata status of a link.

        Args:
            record_id: Link record UUID

        Returns:
            dict: id, status, and metadata (only when COMPLETED, else None)

        Raises:
            LinkNotFoundError: If missing, deleted, or not a link
        """
        record = await self._get_link_or_raise(record_id)
        metadata = None
        if record.metadata_status == MetadataStatus.COMPLETED:
            metadata = {
                "title": record.link_title,
                "description": record.link_description,
                "thumbnail": record.link_thumbnail,
            }
        return {"id": record.id, "status": record.metadata_status, "metadata": metadata}

    async def search(
        self,
        query: str,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[Sequence[FileModel], int]:
        """
        Search visible links by url, title, description or tags.

        Args:
            query: Case-insensitive substring
            page: 1-based page number
            limit: Page size

        Returns:
            tuple: (records newest first, total match count)
        """
        page = max(page, 1)
        limit = max(limit, 1)
        records, total = await file_crud.search_links(
            self.db,
            (query or "").strip(),
            offset=(page - 1) * limit,
            limit=limit,
        )
        logger.info(
            "Link search executed",
            extra={"query": query, "page": page, "limit": limit, "total": total},
        )
        return records, total

    async def list_links(self, page: int = 1, limit: int = 20) -> tuple[Sequence[FileModel], int]:
        """List every visible link, newest first."""
        return await self.search("", page=page, limit=limit)

    async def get_by_short_code(self, short_code: str) -> FileModel:
        """
        Look up a link by its short code.

        Args:
            short_code: User-typed code; case and separators are normalized

        Returns:
            FileModel: The link record

        Raises:
            ValidationError: If the normalized code is malformed
            LinkNotFoundError: If no visible link uses the code
        """
        code = self.allocator.normalize(short_code)
        if not self.allocator.is_valid(code):
            raise ValidationError("Invalid short code format", field="short_code")

        record = await file_crud.get_by_short_code(self.db, code)
        if record is None or not record.is_link:
            raise LinkNotFoundError(code)
        return record

    async def delete(self, record_id: UUID) -> None:
        """
        Soft-delete a link. In-flight enrichment is not cancelled.

        Raises:
            LinkNotFoundError: If missing, already deleted, or not a link
        """
        await self._get_link_or_raise(record_id)
        await file_crud.soft_delete(self.db, record_id)
        await self.db.commit()
        logger.info("Link deleted", extra={"record_id": str(record_id)})

    def _build_fields(
        self,
        url: str,
        categories: list[str],
        tags: list[str] | None,
        title: str | None,
        description: str | None,
        thumbnail: str | None,
        uploader_ip: str,
    ) -> dict:
        url = validate_url(url)
        if not categories:
            raise MissingCategoriesError()
        if thumbnail and len(thumbnail) > MAX_TEXT_LENGTH:
            raise ValidationError("Thumbnail URL is too long", field="thumbnail")

        return {
            "original_name": (title or url)[:MAX_TEXT_LENGTH],
            "mime_type": LINK_MIME_TYPE,
            "size": len(url),
            "filename": generate_link_filename(url),
            "uploader_ip": uploader_ip or "unknown",
            "status": FileStatus.ACTIVE,
            "categories": list(categories),
            "tags": list(tags or []),
            "description": description,
            "is_link": True,
            "link_url": url,
            "link_title": title or None,
            "link_description": description or None,
            "link_thumbnail": thumbnail or None,
            "metadata_status": MetadataStatus.PENDING,
        }

    async def _insert(self, code: str, fields: dict, reserved: set[str]) -> FileModel:
        # Unique constraint is authoritative; a violation means a racing
        # allocator took the code between check and insert
        for _ in range(self.allocator.max_attempts):
            try:
                record = await file_crud.create(self.db, short_code=code, **fields)
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                logger.warning("Short code taken at insert, redrawing", extra={"short_code": code})
                reserved.add(code)
                code = await self.allocator.allocate(self.db, exclude=reserved)
                continue

            # Detach so a later rollback in this session cannot expire it
            self.db.expunge(record)
            logger.info(
                "Link created",
                extra={"record_id": str(record.id), "short_code": code, "url": record.link_url},
            )
            return record

        raise AllocationExhaustedError(self.allocator.max_attempts)

    def _dispatch(self, record: FileModel) -> None:
        self.worker.enqueue(EnrichmentTask(record.id, record.link_url))

    async def _get_link_or_raise(self, record_id: UUID) -> FileModel:
        record = await file_crud.get_link(self.db, record_id)
        if record is None:
            raise LinkNotFoundError(str(record_id))
        return record
