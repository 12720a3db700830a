"""
Session Cookie Gateway

Resolves the session cookie on every request and keeps unauthenticated
callers away from protected paths: API requests get a 401 JSON body,
page requests are redirected to the sign-in page.

A missing, expired, forged or malformed cookie is treated as no session at
all: the gateway reports every case as NOT_AUTHENTICATED and never exposes
the INVALID_TOKEN code raised by the token service.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ridewitus.config.settings import get_settings
from ridewitus.infrastructure.exceptions import (
    AuthenticationError,
    ErrorCode,
    InvalidTokenError,
)
from ridewitus.infrastructure.security.tokens import SessionIdentity, get_token_service


logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({
    "/",
    "/health",
    "/signin",
    "/signup",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/signout",
})

PUBLIC_PREFIXES = (
    "/static",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)

SIGNIN_PATH = "/signin"


def is_public_path(path: str) -> bool:
    if path in PUBLIC_PATHS:
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PUBLIC_PREFIXES)


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Attach ``request.state.identity`` and gate protected paths."""

    def _resolve(self, request: Request) -> Optional[SessionIdentity]:
        token = request.cookies.get(get_settings().auth_cookie_name)
        if not token:
            return None
        try:
            return get_token_service().verify(token)
        except InvalidTokenError:
            return None

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        identity = self._resolve(request)
        request.state.identity = identity

        if identity is None and not is_public_path(path) and request.method != "OPTIONS":
            if is_api_path(path):
                error = AuthenticationError(
                    "Not authenticated",
                    error_code=ErrorCode.NOT_AUTHENTICATED,
                )
                return JSONResponse(status_code=error.status_code, content=error.to_dict())

            logger.debug(f"Redirecting unauthenticated request for {path}")
            return RedirectResponse(
                url=f"{SIGNIN_PATH}?from={quote(path, safe='/')}",
                status_code=307,
            )

        return await call_next(request)
