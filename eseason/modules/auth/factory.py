"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack based on configuration
- Wires dependencies together
- Returns the components the rest of the application consumes
"""

import logging
from dataclasses import dataclass

from ...config.provider import AuthConfig
from .credentials import CredentialModule
from .service import AuthGate
from .tokens import TokenModule

logger = logging.getLogger(__name__)


@dataclass
class AuthStack:
    """Wired authentication components."""
    credentials: CredentialModule
    tokens: TokenModule
    gate: AuthGate


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root for auth: it creates every component
    and injects the token module into the gate.
    """

    @staticmethod
    def build(auth_config: AuthConfig) -> AuthStack:
        """
        Build the complete authentication stack.

        Args:
            auth_config: Token signing configuration

        Returns:
            AuthStack with credential module, token module and gate
        """
        credentials = CredentialModule()
        tokens = TokenModule(auth_config)
        gate = AuthGate(tokens)
        logger.info(
            f"Authentication stack built ({auth_config.jwt_algorithm}, "
            f"token lifetime {auth_config.token_expire_minutes} minutes)"
        )
        return AuthStack(credentials=credentials, tokens=tokens, gate=gate)
