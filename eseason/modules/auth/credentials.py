"""Password hashing with Argon2."""
import logging
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

logger = logging.getLogger(__name__)


class CredentialError(Exception):
    """Password could not be hashed (e.g. no randomness available for the salt)."""


class CredentialModule:
    """
    Salted, adaptive-cost password hashing.

    Every call to ``hash`` embeds a fresh random salt, so the same password
    yields a different stored value each time while all of them verify.
    """

    def __init__(self, hasher: Optional[PasswordHasher] = None):
        self._hasher = hasher or PasswordHasher()
        # Verified against when the account does not exist so login timing
        # does not depend on whether the email is registered.
        self._dummy_hash = self._hasher.hash("eseason-dummy-password")

    def hash(self, password: str) -> str:
        """Hash a password using Argon2."""
        try:
            return self._hasher.hash(password)
        except (HashingError, OSError, NotImplementedError) as e:
            raise CredentialError(str(e)) from e

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        """Verify a password against its hash. Never raises."""
        if not isinstance(password, str) or not isinstance(password_hash, str):
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except VerificationError:
            return False
        except InvalidHashError:
            logger.warning("Stored password hash is malformed")
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one verification on the dummy hash. Always False."""
        self.verify(password, self._dummy_hash)
        return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a stored hash was made with outdated parameters."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except (InvalidHashError, ValueError):
            return False
