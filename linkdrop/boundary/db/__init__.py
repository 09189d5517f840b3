"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - FileModel, FileStatus, MetadataStatus: Core domain entity and enums
  - file_crud: CRUD operation singleton

Dependencies: sqlalchemy, linkdrop.configs
System role: Database adapter providing persistent storage for files and links
"""

from linkdrop.boundary.db.base import Base, TimestampMixin, UUIDMixin
from linkdrop.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from linkdrop.boundary.db.models import FileModel, FileStatus, MetadataStatus
from linkdrop.boundary.db.CRUD import BaseCRUD, FileCRUD, file_crud

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "FileModel",
    "FileStatus",
    "MetadataStatus",
    # CRUD
    "BaseCRUD",
    "FileCRUD",
    "file_crud",
]
