"""Web interface routes implementation."""

import os
from typing import Optional

from fastapi import APIRouter, Request, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from shortener.common.url_builder import build_short_url
from shortener.common.headers import build_base_url
from shortener.errors import NotFoundError, ShortenerError, URLValidationError

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "..", "ux", "web")
templates = Jinja2Templates(directory=template_dir)


def _render_index(request: Request, urls=None, message: str = "", error: str = ""):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"urls": urls or [], "message": message, "error": error},
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """List existing mappings with the shorten form."""
    service = request.app.state.service

    try:
        mappings = await service.list_all()
    except ShortenerError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve URL mappings",
        )

    return _render_index(request, urls=mappings)


@router.post("/shorten", response_class=HTMLResponse, include_in_schema=False)
async def shorten_web(request: Request, url: Optional[str] = Form(None)):
    """Handle form submission; validation errors are shown in the page."""
    service = request.app.state.service
    config = request.app.state.config

    url = (url or "").strip()
    if not url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL parameter is required",
        )

    try:
        result = await service.shorten(url)
    except URLValidationError as e:
        return _render_index(request, error=e.message)
    except ShortenerError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save URL mapping",
        )

    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    short_url = build_short_url(result["short_code"], base_url)

    message = f"Shortened URL: {short_url}"
    if result["already_existed"]:
        message += " (already shortened)"
    return _render_index(request, message=message)


@router.get("/shorten", include_in_schema=False)
async def shorten_wrong_method():
    """The form only posts; keep GET from reaching the redirect route."""
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
        headers={"Allow": "POST"},
    )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, counting the visit."""
    service = request.app.state.service

    if not service.generator.is_valid_format(short_code):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="URL not found")

    try:
        long_url = await service.redirect(short_code)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="URL not found")
    except ShortenerError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update URL mapping",
        )

    return RedirectResponse(url=long_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
