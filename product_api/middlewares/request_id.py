from __future__ import annotations

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from product_api.core.logging import get_logger

logger = get_logger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id

        logger.info("request start %s %s requestId=%s", request.method, request.url.path, request_id)
        started = time.perf_counter()

        response: Response = await call_next(request)
        response.headers["X-Request-Id"] = request_id

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "request end %s %s status=%s %.1fms requestId=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
