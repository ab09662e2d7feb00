# 📄 File: farmx/api/middleware/authentication.py
# 🧭 Purpose (Layman Explanation):
# Acts like a security guard that checks every caller's pass (their token) before they
# reach anything private, such as their cart, orders, plan or farm charts.
# 🧪 Purpose (Technical Summary):
# JWT authentication middleware: decodes the Bearer token with python-jose, puts the
# subject (user id) and claims on request.state, and answers 401 in the standard error
# envelope for missing or invalid tokens. Public paths skip the check.
# 🔗 Dependencies:
# FastAPI, starlette, python-jose, farmx.shared.config.settings
# 🔄 Connected Modules / Calls From:
# farmx.main (middleware registration), farmx.shared.core.dependencies.get_current_user

import logging
from typing import Any, Dict, Optional

from fastapi import Request, Response
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from farmx.api.middleware.error_handling import create_error_response
from farmx.shared.config.settings import get_settings

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({
    "/",
    "/api/v1/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
    "/api/v1/subscriptions/plans",
})


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Authentication middleware for JWT token validation

    Only the token is checked here. Loading the user (and with it the role
    used for privilege decisions) happens in get_current_active_user.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        if self._is_public_path(request.url.path) or request.method == "OPTIONS":
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            return self._authentication_error(request, "No authentication token provided")

        payload = self._decode_token(token)
        if payload is None or not payload.get("sub"):
            return self._authentication_error(request, "Invalid or expired token")

        request.state.user_id = str(payload["sub"])
        request.state.token_payload = payload
        return await call_next(request)

    @staticmethod
    def _is_public_path(path: str) -> bool:
        return path in PUBLIC_PATHS or path.rstrip("/") in PUBLIC_PATHS

    @staticmethod
    def _extract_token(request: Request) -> Optional[str]:
        auth_header = request.headers.get("Authorization", "")
        scheme, _, credentials = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not credentials.strip():
            return None
        return credentials.strip()

    def _decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(
                token,
                self.settings.JWT_SECRET_KEY,
                algorithms=[self.settings.JWT_ALGORITHM],
            )
        except JWTError as e:
            logger.info(f"Token rejected: {e}")
            return None

    @staticmethod
    def _authentication_error(request: Request, message: str) -> Response:
        response = create_error_response(
            error_code="AUTHENTICATION_ERROR",
            message=message,
            status_code=401,
            request_id=getattr(request.state, "request_id", None),
        )
        response.headers["WWW-Authenticate"] = "Bearer"
        return response
