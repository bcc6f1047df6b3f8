"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shortener.common.logging_config import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status, redirect target and timing.

    Server errors are logged at WARNING so they stand out from normal traffic.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("url_shortener.web")

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        line = (
            f"{client_ip} {request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        location = response.headers.get("location")
        if location:
            line += f" location={location}"

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        self.logger.log(level, line)

        return response
