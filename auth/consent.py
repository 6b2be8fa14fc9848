"""
Google OAuth consent flow.

Builds the authorization URL the user is sent to and exchanges the
returned authorization code for an access token at Google's token
endpoint.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from auth.exceptions import AuthDenied, AuthUnavailable
from config import config

logger = logging.getLogger(__name__)

# Token endpoint error codes that mean the grant itself was refused
DENIED_ERROR_CODES = {"access_denied", "invalid_grant", "unauthorized_client"}


@dataclass
class TokenGrant:
    """Access token issued by the token endpoint."""

    access_token: str
    expires_in: Optional[int] = None
    scope: Optional[str] = None


class GoogleConsentFlow:
    """
    Authorization-code consent flow against Google's OAuth 2.0 endpoints.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scopes: Optional[list[str]] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self.client_id = client_id or config.google.client_id
        self.client_secret = client_secret or config.google.client_secret
        self.redirect_uri = redirect_uri or config.google.redirect_uri
        self.scopes = scopes or config.google.scopes
        self._http_client = http_client

    def authorization_url(self, state: str) -> str:
        """
        Build the consent screen URL.

        Args:
            state: Opaque value echoed back on the redirect.

        Returns:
            Absolute URL of the Google consent screen.
        """
        params = {
            "client_id": self.client_id or "",
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
            "access_type": "online",
            "include_granted_scopes": "true",
            "prompt": "consent",
        }
        return f"{config.google.auth_uri}?{urlencode(params)}"

    async def _post(self, url: str, data: dict[str, Any]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, data=data)
        async with httpx.AsyncClient() as client:
            return await client.post(url, data=data)

    async def exchange_code(self, code: str) -> TokenGrant:
        """
        Exchange an authorization code for an access token.

        Raises:
            AuthDenied: The provider refused the grant.
            AuthUnavailable: The provider could not be reached or failed.
        """
        try:
            response = await self._post(
                config.google.token_uri,
                {
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Token endpoint unreachable: {e}")
            raise AuthUnavailable(f"Failed to reach Google token endpoint: {e}") from e

        if not response.is_success:
            error_code = _error_code(response)
            logger.warning(
                f"Token exchange failed: status={response.status_code}, error={error_code}"
            )
            if response.status_code < 500 and error_code in DENIED_ERROR_CODES:
                raise AuthDenied(error_code)
            raise AuthUnavailable(
                f"Google token endpoint returned {response.status_code}: {response.text[:200]}"
            )

        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthUnavailable("Google token endpoint returned no access_token")

        logger.info("Authorization code exchanged for access token")
        return TokenGrant(
            access_token=access_token,
            expires_in=payload.get("expires_in"),
            scope=payload.get("scope"),
        )


def _error_code(response: httpx.Response) -> Optional[str]:
    """Pull the OAuth ``error`` field out of a failed token response."""
    try:
        return response.json().get("error")
    except ValueError:
        return None
