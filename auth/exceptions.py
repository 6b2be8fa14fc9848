"""
Authentication error taxonomy.

All three are surfaced to the caller unmodified; nothing in the auth
package retries or swallows them.
"""


class AuthDenied(Exception):
    """The user declined consent, or the consent response was not acceptable."""


class AuthUnavailable(Exception):
    """The identity provider could not be reached or failed to answer."""


class Unauthenticated(Exception):
    """No usable bearer token is stored at call time."""

    def __init__(self, message: str = "No access token found. Please log in again.") -> None:
        super().__init__(message)
