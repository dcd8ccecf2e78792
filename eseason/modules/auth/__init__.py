"""
Authentication Module - Black Box Interface

Purpose: Hash passwords, issue and validate identity tokens, gate requests
Interface: CredentialModule, TokenModule, AuthGate, AuthFactory
Hidden: Hash parameters, token encoding, header parsing

Replaceable with any token or hashing scheme that honours the same
interfaces.
"""

from .credentials import CredentialError, CredentialModule
from .factory import AuthFactory, AuthStack
from .interfaces import CallerIdentity, TokenClaims
from .service import AuthGate, AuthResult, extract_token
from .tokens import InvalidToken, TokenModule

__all__ = [
    "AuthFactory",
    "AuthGate",
    "AuthResult",
    "AuthStack",
    "CallerIdentity",
    "CredentialError",
    "CredentialModule",
    "InvalidToken",
    "TokenClaims",
    "TokenModule",
    "extract_token",
]
