"""
Authentication Middleware Module - Black Box Interface

Purpose: Enforce the auth gate on every HTTP request
Interface: AuthMiddleware, get_caller_identity, get_optional_identity
Hidden: Header extraction, path matching, error formatting

Identity is attached to ``request.state.identity`` as a CallerIdentity
(or None) and lives only for the duration of that request.
"""

import logging
from typing import Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ...errors import Unauthenticated
from ..api.models import error_envelope
from ..auth.interfaces import CallerIdentity
from ..auth.service import AuthGate

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_PREFIXES = ("/api/v1/passenger", "/api/v1/admin")

DEFAULT_PUBLIC_PATHS = {
    "/api/v1/passenger/register": ["POST"],
    "/api/v1/passenger/login": ["POST"],
}


class AuthMiddleware:
    """
    Configurable authentication middleware for FastAPI applications.

    Paths under a protected prefix must carry a valid token. Everything
    else, including the listed public paths, goes through the optional
    variant: identity is attached when a valid token is present and the
    request continues anonymously otherwise.
    """

    def __init__(
        self,
        gate: AuthGate,
        protected_prefixes: Optional[Iterable[str]] = None,
        public_paths: Optional[Dict[str, list]] = None,
        log_attempts: bool = True
    ):
        """
        Initialize authentication middleware.

        Args:
            gate: AuthGate used to validate the Authorization header
            protected_prefixes: Path prefixes that require authentication
            public_paths: Dict of {path: [methods]} exempt from required auth
            log_attempts: Whether to log authentication attempts
        """
        self.gate = gate
        self.protected_prefixes = tuple(protected_prefixes or DEFAULT_PROTECTED_PREFIXES)
        self.public_paths = public_paths if public_paths is not None else dict(DEFAULT_PUBLIC_PATHS)
        self.log_attempts = log_attempts

    def requires_auth(self, request: Request) -> bool:
        """Check if this request must be authenticated."""
        path = str(request.url.path)
        method = request.method.upper()

        if method == "OPTIONS":
            return False

        # A trailing slash names the same public endpoint
        public_key = path.rstrip("/") or "/"
        if public_key in self.public_paths:
            allowed_methods = self.public_paths[public_key]
            if "*" in allowed_methods or method in allowed_methods:
                return False

        return path.startswith(self.protected_prefixes)

    async def __call__(self, request: Request, call_next):
        """Process the request through the auth gate."""
        authorization = request.headers.get("Authorization")
        request.state.identity = None

        if not self.requires_auth(request):
            request.state.identity = self.gate.optional(authorization)
            return await call_next(request)

        result = self.gate.authenticate(authorization)
        if not result.ok:
            if self.log_attempts:
                logger.warning(
                    f"Rejected {request.method} {request.url.path}: {result.message}"
                    + (f" ({result.error})" if result.error else "")
                )
            return JSONResponse(
                status_code=401,
                content=error_envelope(result.message, result.error)
            )

        if self.log_attempts:
            logger.debug(f"Request authenticated for passenger {result.identity.passenger_id}")

        request.state.identity = result.identity
        return await call_next(request)


def get_optional_identity(request: Request) -> Optional[CallerIdentity]:
    """Dependency returning the caller identity, or None when anonymous."""
    return getattr(request.state, "identity", None)


def get_caller_identity(request: Request) -> CallerIdentity:
    """Dependency returning the caller identity or failing with 401."""
    identity = get_optional_identity(request)
    if identity is None:
        raise Unauthenticated("Authorization header required")
    return identity


__all__ = [
    "AuthMiddleware",
    "get_caller_identity",
    "get_optional_identity",
]
