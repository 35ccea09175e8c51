# sponsorship/middleware/logging.py
from __future__ import annotations

import time
import uuid
from typing import Dict, Mapping

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from sponsorship.core.logging import get_structlog_logger, set_request_id

logger = get_structlog_logger(__name__)

QUIET_PATHS = frozenset({"/health", "/api/health", "/metrics"})

SENSITIVE_HEADERS = ("authorization", "cookie", "set-cookie", "x-api-key", "token", "secret")


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        key: "[REDACTED]" if any(marker in key.lower() for marker in SENSITIVE_HEADERS) else value
        for key, value in headers.items()
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id into the log context and logs each request/response pair."""

    async def dispatch(self, request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        set_request_id(None)
        set_request_id(request_id)
        quiet = request.url.path in QUIET_PATHS
        started = time.perf_counter()

        if not quiet:
            logger.info(
                "request.received",
                method=request.method,
                path=request.url.path,
                query_params=dict(request.query_params) or None,
                client_ip=request.client.host if request.client else "unknown",
                headers=redact_headers(request.headers),
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request.exception",
                method=request.method,
                path=request.url.path,
                response_time_ms=round((time.perf_counter() - started) * 1000, 2),
                exception_type=type(exc).__name__,
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}"

        if not quiet:
            log = logger.warning if response.status_code >= 400 else logger.info
            log(
                "response.sent",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                response_time_ms=round(elapsed * 1000, 2),
            )
        return response
