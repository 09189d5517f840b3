"""
Link validation utilities.

Request-level rules not covered by Pydantic models. Per-URL scheme
checks happen in the service so batch uploads can report them per item.

Dependencies: linkdrop.models.link, linkdrop.core.exceptions
System role: Link request validation
"""

from linkdrop.core.exceptions import MissingCategoriesError, ValidationError
from linkdrop.models.link import UploadLinksRequest


def validate_upload_request(request: UploadLinksRequest) -> None:
    """
    Validate link upload request with business rules.

    Args:
        request: UploadLinksRequest with urls, categories, tags

    Raises:
        ValidationError: If no URL is provided
        MissingCategoriesError: If no non-blank category is provided
    """
    if not request.urls:
        raise ValidationError("At least one URL is required", field="urls")

    if not any(category.strip() for category in request.categories):
        raise MissingCategoriesError()


def validate_search_query(query: str | None) -> str:
    """
    Validate a search query.

    Raises:
        ValidationError: If the query is missing or blank
    """
    if query is None or not query.strip():
        raise ValidationError("Search query is required", field="q")
    return query.strip()
