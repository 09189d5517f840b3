"""
Application services.

Exports:
  - LinkService: Link submission, retry, status, search and deletion
  - BatchResult: Batch submission outcome
"""

from linkdrop.application.services.link_service import BatchResult, LinkService

__all__ = [
    "BatchResult",
    "LinkService",
]
