"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from linkdrop.boundary.db.CRUD import file_crud

    record = await file_crud.get_link(db, link_id)
"""

from linkdrop.boundary.db.CRUD.base_crud import BaseCRUD
from linkdrop.boundary.db.CRUD.file_crud import FileCRUD, file_crud

__all__ = [
    "BaseCRUD",
    "FileCRUD",
    "file_crud",
]
