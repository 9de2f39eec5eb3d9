"""
backend/app/middleware/logging.py

Purpose:
    One structured JSON log line per request. Ledger mutations (POST/DELETE)
    log at INFO so settlements and deletions leave an audit trail; reads log
    at DEBUG. Failed requests log at WARNING, server errors at ERROR.

Dependencies:
    - starlette
    - app.config
"""

import json
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger("wagerbook.http")

_MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def _log_level(method: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if method in _MUTATING_METHODS:
        return logging.INFO
    return logging.DEBUG


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start = time.perf_counter()

        response: Response = await call_next(request)

        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query": str(request.query_params) or None,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        }
        logger.log(_log_level(request.method, response.status_code), json.dumps(log_data))

        response.headers["X-Request-ID"] = request_id
        return response


def setup_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    # The middleware already emits one line per request.
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
