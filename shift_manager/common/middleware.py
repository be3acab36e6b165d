"""HTTP middleware: request logging and security headers."""

import logging
import time

from fastapi import FastAPI, Request

from shift_manager.config import settings

logger = logging.getLogger("shift_manager.http")

_CSP = (
    "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: blob:; connect-src 'self'; font-src 'self' data:; "
    "frame-ancestors 'none'"
)


def register_middleware(app: FastAPI) -> None:
    """Attach the request logger and security-header middleware."""

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        if settings.is_production:
            response.headers["Content-Security-Policy"] = _CSP
        return response

    @app.middleware("http")
    async def request_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "%s %s %s in %dms",
                request.method, path, response.status_code, elapsed_ms,
            )
        return response
