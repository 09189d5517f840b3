"""
Link error handling utilities.

Provides a decorator for consistent error handling across link-related
API endpoints, mapping domain exceptions to HTTP status codes.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from linkdrop.core.exceptions import (
    AllocationExhaustedError,
    LinkNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_link_errors(func: F) -> F:
    """
    Decorator to handle link-related errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with context (link_id)
    - Mapping specific exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except LinkNotFoundError as e:
            logger.warning(
                "Link not found",
                extra={"link_id": e.link_id, "error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=e.message
            )

        except ValidationError as e:
            logger.warning(
                "Invalid link request",
                extra={"error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=e.message
            )

        except AllocationExhaustedError as e:
            logger.error(
                "Short code allocation exhausted",
                extra={"error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in link operation",
                extra={"error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during link operation"
            )

    return wrapper  # type: ignore
