"""
Google authentication for the keyword tracker.

Provides the credential holder, the consent flow and the token store.
"""

from .consent import GoogleConsentFlow, TokenGrant
from .credentials import CredentialHolder
from .exceptions import AuthDenied, AuthUnavailable, Unauthenticated
from .token_store import RedisTokenStore

__all__ = [
    "AuthDenied",
    "AuthUnavailable",
    "CredentialHolder",
    "GoogleConsentFlow",
    "RedisTokenStore",
    "TokenGrant",
    "Unauthenticated",
]
