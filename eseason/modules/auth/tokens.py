"""
Signed identity tokens (JWT, HMAC).

Tokens are self-contained: validity depends only on the signature and the
expiry claim. There is no revocation list.
"""
import logging
from datetime import UTC, datetime, timedelta
from typing import Optional

import jwt

from ...config.provider import AuthConfig
from .interfaces import TokenClaims

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class InvalidToken(Exception):
    """Token failed signature, expiry, algorithm or structure checks."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TokenModule:
    """Issues and validates time-bound tokens carrying passenger id and email."""

    def __init__(self, config: AuthConfig):
        """
        Initialize token module with injected config.

        Args:
            config: Auth configuration (secret, algorithm, lifetime)
        """
        self._secret = config.secret_bytes
        self._algorithm = config.jwt_algorithm
        self._lifetime = timedelta(minutes=config.token_expire_minutes)

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, passenger_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token for a passenger.

        Args:
            passenger_id: Passenger identifier
            email: Passenger email
            expires_delta: Override for the configured lifetime

        Returns:
            Encoded token string
        """
        now = datetime.now(UTC)
        expire = now + (expires_delta if expires_delta is not None else self._lifetime)
        claims = {
            "passenger_id": passenger_id,
            "email": email,
            "sub": str(passenger_id),
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            InvalidToken: With a human-readable reason
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken("Token is empty")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token has expired")
        except jwt.InvalidSignatureError:
            raise InvalidToken("Invalid token signature")
        except jwt.InvalidAlgorithmError:
            raise InvalidToken("Token signing algorithm is not allowed")
        except jwt.MissingRequiredClaimError as e:
            raise InvalidToken(f"Token is missing claim: {e.claim}")
        except jwt.DecodeError:
            raise InvalidToken("Malformed token")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}")

        return self._claims_from_payload(payload)

    @staticmethod
    def _claims_from_payload(payload: dict) -> TokenClaims:
        passenger_id = payload.get("passenger_id")
        email = payload.get("email")

        # bool is an int subclass
        if not isinstance(passenger_id, int) or isinstance(passenger_id, bool) or passenger_id <= 0:
            raise InvalidToken("Malformed token claims")
        if not isinstance(email, str) or not email:
            raise InvalidToken("Malformed token claims")
        if payload.get("sub") != str(passenger_id):
            raise InvalidToken("Malformed token claims")

        return TokenClaims(
            passenger_id=passenger_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
