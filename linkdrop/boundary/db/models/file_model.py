"""
File ORM model.

Stores uploaded artifacts. Binary files and web links share this table and
therefore one short-code namespace; link rows carry is_link=True plus the
link_* columns and a metadata enrichment status.

Dependencies: sqlalchemy, linkdrop.boundary.db.base
System role: Persistent catalogue of uploaded files and links
"""

import enum

from sqlalchemy import JSON, Boolean, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from linkdrop.boundary.db.base import Base, TimestampMixin, UUIDMixin

# Bound for URL-like and name columns
MAX_TEXT_LENGTH = 2048


class FileStatus(str, enum.Enum):
    """
    Record lifecycle states governing visibility.

    ACTIVE: Visible in listings and search
    DELETED: Soft-deleted; hidden from every read path
    """

    ACTIVE = "active"
    DELETED = "deleted"


class MetadataStatus(str, enum.Enum):
    """
    Link metadata enrichment states.

    PENDING: Record created, enrichment not started
    PROCESSING: Resolution attempt in flight
    COMPLETED: Enrichment ran to completion (fields may still be empty)
    FAILED: Enrichment raised an unexpected error; retry is possible
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FileModel(Base, UUIDMixin, TimestampMixin):
    """
    File ORM model for uploaded files and links.

    Attributes:
        id: UUID primary key (auto-generated)
        short_code: Six-character public identifier, unique across files and links
        original_name: Display name (caller title or the URL for links)
        mime_type: MIME type; "text/url" for links
        size: Size in bytes; URL length for links
        filename: Stored filename; synthetic "link-..." name for links
        uploader_ip: Originating request address (audit only)
        status: Lifecycle status (ACTIVE/DELETED)
        categories: Caller-supplied categories (non-empty)
        tags: Caller-supplied tags
        description: Caller-supplied description
        is_link: True for link uploads
        link_url: Link target (http/https)
        link_title / link_description / link_thumbnail: Page metadata
        metadata_status: Enrichment state for link rows
        created_at: Upload timestamp (UTC)
        updated_at: Last mutation timestamp (UTC)

    Constraints:
        short_code: UNIQUE; a violation on insert is treated as a collision
    """

    __tablename__ = "files"

    short_code: Mapped[str] = mapped_column(
        String(6),
        nullable=False,
        unique=True,
        index=True,
        doc="Public short code",
    )
    original_name: Mapped[str] = mapped_column(String(MAX_TEXT_LENGTH), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    filename: Mapped[str] = mapped_column(String(MAX_TEXT_LENGTH), nullable=False)
    uploader_ip: Mapped[str] = mapped_column(String(64), nullable=False, default="unknown")

    status: Mapped[FileStatus] = mapped_column(
        Enum(FileStatus, native_enum=False),
        nullable=False,
        default=FileStatus.ACTIVE,
    )

    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_link: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    link_url: Mapped[str | None] = mapped_column(String(MAX_TEXT_LENGTH), nullable=True)
    link_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_thumbnail: Mapped[str | None] = mapped_column(String(MAX_TEXT_LENGTH), nullable=True)

    metadata_status: Mapped[MetadataStatus | None] = mapped_column(
        Enum(MetadataStatus, native_enum=False),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<FileModel {self.short_code} {self.link_url or self.filename} ({self.metadata_status})>"
