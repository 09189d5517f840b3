"""
Exception hierarchy for the linkdrop application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class LinkDropException(Exception):
    """Base exception for all linkdrop application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(LinkDropException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidUrlError(ValidationError):
    """Raised when a submitted link is not an http(s) URL."""

    def __init__(self, url: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["url"] = url
        super().__init__("Invalid URL format", field="url", details=details)


class MissingCategoriesError(ValidationError):
    """Raised when a submission carries no category."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("At least one category is required", field="categories", details=details)


class AllocationExhaustedError(LinkDropException):
    """Raised when no unused short code could be drawn within the attempt bound."""

    def __init__(self, attempts: int, details: dict[str, Any] | None = None) -> None:
        """
        Initialize allocation exhaustion error.

        Args:
            attempts: Number of consecutive collisions observed
            details: Additional context
        """
        details = details or {}
        details["attempts"] = attempts
        super().__init__("Unable to allocate a unique short code", details)


class LinkNotFoundError(LinkDropException):
    """Raised when a link record cannot be found (or is not a link)."""

    def __init__(self, link_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize link not found error.

        Args:
            link_id: ID or short code of the missing link
            details: Additional context
        """
        details = details or {}
        details["link_id"] = link_id
        self.link_id = link_id
        super().__init__(f"Link not found: {link_id}", details)


class InvalidStateTransitionError(LinkDropException):
    """Raised when a metadata status transition is not permitted."""

    def __init__(
        self,
        record_id: str,
        current: str | None,
        target: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"record_id": record_id, "current": current, "target": target})
        super().__init__(f"Cannot move metadata status from {current} to {target}", details)
