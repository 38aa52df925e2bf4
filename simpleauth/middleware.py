"""
Token Auth Middleware for Starlette / FastAPI
=============================================

Rejects requests that do not carry a valid SimpleAuth token.

Usage:
    from simpleauth import AuthConfig, SimpleAuth
    from simpleauth.middleware import TokenAuthMiddleware

    app.add_middleware(
        TokenAuthMiddleware,
        auth=SimpleAuth(AuthConfig.from_env()),
    )

The decoded payload is available to handlers as
``request.state.token_payload``.
"""

from typing import Iterable, Optional, Set

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .headers import HTTP_HEADER, parse_auth_value
from .signer import SimpleAuth

logger = structlog.get_logger(__name__)


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """
    Verifies the Authentication header on every non-public request.
    """

    # Paths that bypass authentication (health checks, etc.)
    DEFAULT_PUBLIC_PATHS: Set[str] = {"/health", "/ready", "/metrics"}

    def __init__(
        self,
        app,
        auth: SimpleAuth,
        public_paths: Optional[Iterable[str]] = None,
        header_name: str = HTTP_HEADER,
    ):
        super().__init__(app)
        self.auth = auth
        self.public_paths = (
            set(public_paths) if public_paths is not None else set(self.DEFAULT_PUBLIC_PATHS)
        )
        self.header_name = header_name

    def _is_public_path(self, path: str) -> bool:
        return path in self.public_paths or (path.rstrip("/") or "/") in self.public_paths

    @staticmethod
    def _forbidden(code: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={
                "error": "forbidden",
                "message": message,
                "code": code,
            },
        )

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if self._is_public_path(path) or request.method == "OPTIONS":
            return await call_next(request)

        token = parse_auth_value(request.headers.get(self.header_name))
        if token is None:
            logger.warning(
                "token_auth_blocked",
                path=path,
                method=request.method,
                reason="missing_token",
            )
            return self._forbidden("TOKEN_REQUIRED", "Authentication token required")

        result = self.auth.check(token)
        if not result.valid:
            logger.warning(
                "token_auth_blocked",
                path=path,
                method=request.method,
                reason=result.reason.value,
            )
            return self._forbidden("INVALID_TOKEN", "Invalid or expired token")

        request.state.token_payload = result.payload
        logger.debug("token_auth_passed", path=path)
        return await call_next(request)
