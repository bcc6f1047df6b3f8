"""API routes implementation."""

from dataclasses import asdict

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
    URLListResponse,
    HealthResponse,
    ErrorResponse,
)
from shortener.common.url_builder import build_short_url
from shortener.common.headers import build_base_url
from shortener.errors import NotFoundError, ShortenerError, URLValidationError

router = APIRouter()


def _info(mapping) -> URLInfoResponse:
    return URLInfoResponse(**asdict(mapping))


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Create short URL",
    description="Shorten a URL. A URL that was shortened before returns its existing code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        result = await service.shorten(body.url)
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ShortenerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    return ShortenResponse(
        short_code=result["short_code"],
        short_url=build_short_url(result["short_code"], base_url),
        long_url=result["long_url"],
        created_at=result["created_at"],
        already_existed=result["already_existed"],
    )


@router.get(
    "/urls",
    response_model=URLListResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="List URLs",
    description="List every stored URL mapping with its visit statistics.",
)
async def list_urls(request: Request):
    """List all URL mappings."""
    service = request.app.state.service

    try:
        mappings = await service.list_all()
    except ShortenerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return URLListResponse(count=len(mappings), urls=[_info(m) for m in mappings])


@router.get(
    "/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Get URL information",
    description="Get a URL mapping without counting a visit.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.get_mapping(short_code)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )
    except ShortenerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return _info(mapping)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its storage backend are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        storage="healthy" if health["storage"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
