"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a validated identity token."""
    passenger_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller attached to request state."""
    passenger_id: int
    email: str


class TokenValidator(Protocol):
    """Protocol for token validation - allows swappable implementations."""

    def validate(self, token: str) -> TokenClaims:
        """
        Validate a signed identity token.

        Args:
            token: Encoded token string (no Bearer prefix)

        Returns:
            TokenClaims on success

        Raises:
            InvalidToken: On bad signature, expiry, malformed claims or wrong algorithm
        """
        ...
