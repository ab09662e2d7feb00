# 📄 File: farmx/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request made to the FarmX API: what was asked for, who asked,
# how long it took and how it ended, each stamped with a tracking number.
# 🧪 Purpose (Technical Summary):
# Request logging middleware: assigns/propagates X-Request-ID, binds request and user ids
# into the logging contextvars for the request's scope, and emits a timing record through
# PerformanceLogger. Slow requests are logged as warnings.
# 🔗 Dependencies:
# FastAPI, starlette, farmx.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# farmx.main (middleware registration)

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from farmx.shared.utils.logging import PerformanceLogger, log_context

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = frozenset({"/api/v1/health", "/favicon.ico"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.performance_logger = PerformanceLogger(logging.getLogger("farmx.http"))
        self.slow_request_threshold = slow_request_threshold
        self.request_id_header = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.request_id_header) or str(uuid.uuid4())
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                duration = time.perf_counter() - start_time
                logger.error(
                    f"Request failed: {request.method} {request.url.path} after {duration:.3f}s",
                    exc_info=True,
                )
                raise

            duration = time.perf_counter() - start_time
            if request.url.path not in EXCLUDED_PATHS:
                self.performance_logger.log_request(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=duration * 1000,
                    user_id=getattr(request.state, "user_id", None),
                )
                if duration > self.slow_request_threshold:
                    logger.warning(f"Slow request: {request.method} {request.url.path} took {duration:.3f}s")

        response.headers[self.request_id_header] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response
