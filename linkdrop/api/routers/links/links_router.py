"""
Link API endpoints.

Routes:
- POST /links/upload - Upload one or more links
- GET /links - List links
- GET /links/search - Search links
- GET /links/code/{short_code} - Get link by short code
- GET /links/{id}/metadata-status - Poll metadata enrichment status
- POST /links/{id}/retry-metadata - Re-run metadata enrichment
- DELETE /links/{id} - Soft-delete link

Dependencies: linkdrop.application.services, linkdrop.models
System role: Link management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from linkdrop.api.deps.dependencies import get_link_service, get_settings_dependency
from linkdrop.application.services.link_service import LinkService
from linkdrop.configs import Settings
from linkdrop.models.common import ErrorResponse, Pagination
from linkdrop.models.link import (
    BatchUploadResponse,
    LinkListResponse,
    LinkResponse,
    LinkUploadError,
    MetadataStatusResponse,
    RetryMetadataResponse,
    UploadLinksRequest,
)

from .link_error_handling import handle_link_errors
from .link_validators import validate_search_query, validate_upload_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["links"])


def get_client_ip(request: Request) -> str:
    """Return the caller address, or "unknown" when the transport hides it."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def resolve_limit(limit: int | None, settings: Settings) -> int:
    if limit is None:
        return settings.default_page_size
    return min(limit, settings.max_page_size)


@router.post(
    "/upload",
    response_model=BatchUploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@handle_link_errors
async def upload_links(
    body: UploadLinksRequest,
    request: Request,
    link_service: LinkService = Depends(get_link_service),
) -> BatchUploadResponse:
    """
    Upload links. Records are returned with PENDING metadata; enrichment runs in the background.

    Args:
        body: UploadLinksRequest with urls, categories, tags
        request: Incoming request (client address for audit)
        link_service: Injected LinkService

    Returns:
        BatchUploadResponse: Created links and per-URL errors

    Raises:
        HTTPException(400): Empty urls/categories, or the single URL is invalid
        HTTPException(500): Short code allocation failed
    """
    validate_upload_request(body)
    uploader_ip = get_client_ip(request)

    logger.info(
        "Link upload request",
        extra={"url_count": len(body.urls), "categories": body.categories, "uploader_ip": uploader_ip}
    )

    if len(body.urls) == 1:
        item = body.urls[0]
        record = await link_service.submit_one(
            url=item.url,
            categories=[*body.categories, *item.categories],
            tags=[*body.tags, *item.tags],
            title=item.title,
            description=item.description,
            thumbnail=item.thumbnail,
            uploader_ip=uploader_ip,
        )
        return BatchUploadResponse(
            success=True,
            files=[LinkResponse.model_validate(record)],
            total=1,
            errors=[],
        )

    result = await link_service.submit_batch(
        body.urls,
        categories=body.categories,
        tags=body.tags,
        uploader_ip=uploader_ip,
    )

    if not result.success:
        logger.warning(
            "Link upload partially failed",
            extra={"success_count": len(result.files), "error_count": len(result.errors)}
        )

    return BatchUploadResponse(
        success=result.success,
        files=[LinkResponse.model_validate(record) for record in result.files],
        total=len(result.files),
        errors=[LinkUploadError(**error) for error in result.errors],
    )


@router.get("", response_model=LinkListResponse)
@handle_link_errors
async def list_links(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings_dependency),
) -> LinkListResponse:
    """List visible links, newest first."""
    limit = resolve_limit(limit, settings)
    records, total = await link_service.list_links(page=page, limit=limit)
    return LinkListResponse(
        data=[LinkResponse.model_validate(record) for record in records],
        pagination=Pagination.build(page, limit, total),
    )


@router.get(
    "/search",
    response_model=LinkListResponse,
    responses={400: {"model": ErrorResponse}},
)
@handle_link_errors
async def search_links(
    q: str | None = Query(None, description="Case-insensitive text to match"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings_dependency),
) -> LinkListResponse:
    """
    Search links by url, title, description and tags.

    Raises:
        HTTPException(400): Missing or blank query
    """
    query = validate_search_query(q)
    limit = resolve_limit(limit, settings)
    records, total = await link_service.search(query, page=page, limit=limit)
    return LinkListResponse(
        data=[LinkResponse.model_validate(record) for record in records],
        pagination=Pagination.build(page, limit, total),
    )


@router.get(
    "/code/{short_code}",
    response_model=LinkResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@handle_link_errors
async def get_link_by_short_code(
    short_code: str,
    link_service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Get a link by its short code (case-insensitive)."""
    record = await link_service.get_by_short_code(short_code)
    return LinkResponse.model_validate(record)


@router.get(
    "/{link_id}/metadata-status",
    response_model=MetadataStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
@handle_link_errors
async def get_metadata_status(
    link_id: UUID,
    link_service: LinkService = Depends(get_link_service),
) -> MetadataStatusResponse:
    """
    Poll metadata enrichment status.

    Metadata is only included once the status is COMPLETED.
    """
    return MetadataStatusResponse(**await link_service.get_status(link_id))


@router.post(
    "/{link_id}/retry-metadata",
    response_model=RetryMetadataResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={404: {"model": ErrorResponse}},
)
@handle_link_errors
async def retry_metadata(
    link_id: UUID,
    link_service: LinkService = Depends(get_link_service),
) -> RetryMetadataResponse:
    """Queue a new enrichment run for a link."""
    record = await link_service.retry(link_id)
    return RetryMetadataResponse(id=record.id)


@router.delete(
    "/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
@handle_link_errors
async def delete_link(
    link_id: UUID,
    link_service: LinkService = Depends(get_link_service),
) -> Response:
    """Soft-delete a link."""
    await link_service.delete(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
