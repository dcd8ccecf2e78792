"""
Authentication Gate following Black Box Design principles.

This module provides:
- Bearer token extraction from the Authorization header
- Standardized authentication results
- Required and optional authentication entry points
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...errors import Unauthenticated
from .interfaces import CallerIdentity, TokenValidator
from .tokens import InvalidToken

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass
class AuthResult:
    """Standardized authentication result."""
    ok: bool
    identity: Optional[CallerIdentity]
    message: Optional[str] = None
    error: Optional[str] = None


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header value.

    The ``Bearer `` prefix is optional. Returns None when nothing usable
    remains.
    """
    if authorization is None:
        return None
    token = authorization
    if token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):]
    token = token.strip()
    return token or None


class AuthGate:
    """
    Request-level authentication.

    Header present -> token extracted -> token valid -> authenticated,
    with a rejection at each step.
    """

    def __init__(self, token_validator: TokenValidator):
        """
        Initialize with any validator exposing ``validate(token)``.

        Args:
            token_validator: Token validation backend
        """
        self._validator = token_validator

    def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """
        Authenticate a request from its Authorization header value.

        Args:
            authorization: Raw header value or None when absent

        Returns:
            AuthResult with identity on success or a rejection message
        """
        if not authorization:
            return AuthResult(ok=False, identity=None, message="Authorization header required")

        token = extract_token(authorization)
        if token is None:
            return AuthResult(ok=False, identity=None, message="Token required")

        try:
            claims = self._validator.validate(token)
        except InvalidToken as e:
            return AuthResult(ok=False, identity=None, message="Invalid token", error=e.reason)

        return AuthResult(
            ok=True,
            identity=CallerIdentity(passenger_id=claims.passenger_id, email=claims.email),
        )

    def require(self, authorization: Optional[str]) -> CallerIdentity:
        """Authenticate or raise Unauthenticated."""
        result = self.authenticate(authorization)
        if not result.ok:
            raise Unauthenticated(result.message, result.error)
        return result.identity

    def optional(self, authorization: Optional[str]) -> Optional[CallerIdentity]:
        """Authenticate if possible. Never rejects."""
        result = self.authenticate(authorization)
        if not result.ok and authorization:
            logger.debug(f"Ignoring unusable credentials on optional auth: {result.message}")
        return result.identity
