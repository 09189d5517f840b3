"""
Links router package.

Exports the router for link upload and lookup endpoints.
"""

from .links_router import router

__all__ = ["router"]
