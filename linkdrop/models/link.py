"""
Link domain models and schemas.

Request/response schemas for link upload, listing, search and
metadata status polling.

Dependencies: pydantic, linkdrop.boundary.db.models
System role: Link API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from linkdrop.boundary.db.models.file_model import MAX_TEXT_LENGTH, FileStatus, MetadataStatus
from linkdrop.models.common import Pagination


class LinkInput(BaseModel):
    """One link in an upload request."""

    url: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH, description="Link target (http/https)")
    title: str | None = Field(None, max_length=MAX_TEXT_LENGTH, description="Caller title, never overwritten")
    description: str | None = Field(None, description="Caller description, never overwritten")
    thumbnail: str | None = Field(None, max_length=MAX_TEXT_LENGTH, description="Caller thumbnail URL")
    categories: list[str] = Field(default_factory=list, description="Item categories")
    tags: list[str] = Field(default_factory=list, description="Item tags")


class UploadLinksRequest(BaseModel):
    """Request schema for uploading one or more links."""

    urls: list[LinkInput] = Field(default_factory=list, description="Links to upload")
    categories: list[str] = Field(default_factory=list, description="Categories applied to every link")
    tags: list[str] = Field(default_factory=list, description="Tags applied to every link")


class LinkResponse(BaseModel):
    """Read model for a link record."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    short_code: str
    original_name: str
    mime_type: str
    size: int
    filename: str
    status: FileStatus
    categories: list[str]
    tags: list[str]
    description: str | None = None
    is_link: bool
    link_url: str | None = None
    link_title: str | None = None
    link_description: str | None = None
    link_thumbnail: str | None = None
    metadata_status: MetadataStatus | None = None
    created_at: datetime
    updated_at: datetime


class LinkUploadError(BaseModel):
    """Per-item failure inside a batch upload."""

    url: str
    error: str


class BatchUploadResponse(BaseModel):
    """Response schema for link uploads."""

    success: bool
    files: list[LinkResponse]
    total: int
    errors: list[LinkUploadError] = Field(default_factory=list)


class LinkListResponse(BaseModel):
    """Paginated link listing or search result."""

    data: list[LinkResponse]
    pagination: Pagination


class MetadataPayload(BaseModel):
    """Resolved page metadata."""

    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None


class MetadataStatusResponse(BaseModel):
    """Metadata status; metadata is present only once COMPLETED."""

    id: uuid.UUID
    status: MetadataStatus | None
    metadata: MetadataPayload | None = None


class RetryMetadataResponse(BaseModel):
    """Acknowledgement for a queued metadata retry."""

    id: uuid.UUID
    queued: bool = True
    message: str = "Metadata retry queued"
