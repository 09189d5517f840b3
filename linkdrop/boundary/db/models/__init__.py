"""
Database models package.

Exports:
  - FileModel: File/link ORM model
  - FileStatus, MetadataStatus: Lifecycle and enrichment enums

Dependencies: sqlalchemy, linkdrop.boundary.db.base
System role: Database model definitions for domain entities
"""

from linkdrop.boundary.db.models.file_model import FileModel, FileStatus, MetadataStatus

__all__ = [
    "FileModel",
    "FileStatus",
    "MetadataStatus",
]
