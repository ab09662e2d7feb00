# 📄 File: farmx/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# Catches anything that goes wrong while answering a request and turns it into one
# consistent, readable error message instead of a crash.
# 🧪 Purpose (Technical Summary):
# Global error handling: the ErrorHandlingMiddleware maps unhandled exceptions to a 500
# envelope, and the exception handlers registered in main render FarmXException,
# request validation and rate limit failures as {"error": {code, message, details,
# timestamp, request_id}}.
# 🔗 Dependencies:
# FastAPI, starlette, slowapi, farmx.shared.core.exceptions, logging, traceback
# 🔄 Connected Modules / Calls From:
# farmx.main (middleware and exception handler registration)

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from farmx.shared.config.settings import get_settings
from farmx.shared.core.exceptions import FarmXException

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the FarmX API

    Domain exceptions are rendered by the registered exception handlers before
    they reach this layer; anything that still escapes is logged with its
    traceback and answered with a 500 envelope.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except FarmXException as exc:
            return await farmx_exception_handler(request, exc)
        except Exception as exc:
            logger.error(
                f"Server error in {request.method} {request.url.path}",
                extra={
                    "method": request.method,
                    "path": str(request.url.path),
                    "client_ip": get_client_ip(request),
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                },
                exc_info=True,
            )

            details: Dict[str, Any] = {}
            if self.settings.DEBUG and not self.settings.is_production:
                details["debug"] = {
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc().split('\n'),
                }

            return create_error_response(
                error_code="INTERNAL_SERVER_ERROR",
                message="An internal server error occurred",
                status_code=500,
                details=details,
                request_id=getattr(request.state, "request_id", None),
            )


def get_client_ip(request: Request) -> str:
    """Client address, honouring proxy headers."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> JSONResponse:
    """
    Create a standardized error response

    Args:
        error_code: Error code identifier
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        request_id: Request correlation ID

    Returns:
        JSON error response
    """
    error_response = {
        "error": {
            "code": error_code,
            "message": message,
            "details": jsonable_encoder(details or {}),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id,
        }
    }

    response = JSONResponse(status_code=status_code, content=error_response)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    response.headers["X-Error-Code"] = error_code
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def farmx_exception_handler(request: Request, exc: FarmXException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"{exc.error_code} in {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "error_code": exc.error_code},
    )
    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=getattr(request.state, "request_id", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests are 400 VALIDATION_ERROR, like domain validation failures."""
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    return create_error_response(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=400,
        details={"validation_errors": validation_errors},
        request_id=getattr(request.state, "request_id", None),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        f"Rate limit exceeded for {request.method} {request.url.path}",
        extra={"client_ip": get_client_ip(request), "limit": str(exc.detail)},
    )
    response = create_error_response(
        error_code="RATE_LIMIT_EXCEEDED",
        message=f"Rate limit of {exc.detail} exceeded. Please try again later.",
        status_code=429,
        details={"rate_limit": str(exc.detail)},
        request_id=getattr(request.state, "request_id", None),
    )
    response.headers["Retry-After"] = "60"
    return response
