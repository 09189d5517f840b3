"""FastAPI dependencies."""

from linkdrop.api.deps.dependencies import (
    AppContainer,
    build_container,
    get_container,
    get_db_session,
    get_link_service,
    get_settings_dependency,
)

__all__ = [
    "AppContainer",
    "build_container",
    "get_container",
    "get_db_session",
    "get_link_service",
    "get_settings_dependency",
]
