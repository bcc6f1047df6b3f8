"""FastAPI application factory."""

import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


STATIC_DIR = os.path.join(os.path.dirname(__file__), "..", "ux", "web", "static")


def create_app(
    store_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        store_instance: Mapping store instance
        service_instance: Service instance
        config: Configuration instance
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Shorten long URLs and redirect visitors, counting visits",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    
    # Store instances in app state for access in routes
    app.state.store = store_instance
    app.state.service = service_instance
    app.state.config = config
    
    app.add_middleware(LoggingMiddleware)
    
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    
    app.include_router(api_router, prefix="/api", tags=["API"])
    # Web router last: it owns the catch-all /{short_code}
    app.include_router(web_router, tags=["Web"])
    
    return app
