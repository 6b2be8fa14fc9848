"""
Credential holder for the Search Console bearer token.

Owns the token lifecycle: storage, liveness checks against Google's
tokeninfo endpoint, the interactive consent flow and logout. Analytics
code only reads the token through this object.
"""

import logging
import secrets
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol

import httpx

from auth.consent import GoogleConsentFlow
from auth.exceptions import AuthDenied
from config import config

logger = logging.getLogger(__name__)

# Receives the consent URL and resolves with the redirect query parameters
ConsentPrompt = Callable[[str], Awaitable[Mapping[str, str]]]


class TokenStore(Protocol):
    """Durable single-slot token storage."""

    async def get(self) -> Optional[str]: ...

    async def set(self, token: str, expires_in: Optional[int] = None) -> None: ...

    async def delete(self) -> None: ...


class CredentialHolder:
    """
    Holds the bearer token used for Search Console queries.

    The store and consent flow are injected so tests can swap them for
    doubles. No operation here retries; failures surface to the caller.
    """

    def __init__(
        self,
        store: TokenStore,
        consent_flow: Optional[GoogleConsentFlow] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        state_ttl: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.store = store
        self.consent_flow = consent_flow or GoogleConsentFlow()
        self._http_client = http_client
        self.state_ttl = state_ttl if state_ttl is not None else config.google.consent_state_ttl
        self._clock = clock
        # state -> time issued
        self._pending_states: dict[str, float] = {}

    async def get_token(self) -> Optional[str]:
        """Return the stored token, if any."""
        return await self.store.get()

    async def set_token(self, token: str, expires_in: Optional[int] = None) -> None:
        """Store a token obtained elsewhere."""
        await self.store.set(token, expires_in)

    async def clear_token(self) -> None:
        """Remove the stored token. Safe to call when nothing is stored."""
        await self.store.delete()

    async def _get(self, url: str, headers: dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(url, headers=headers)
        async with httpx.AsyncClient() as client:
            return await client.get(url, headers=headers)

    async def has_valid_token(self) -> bool:
        """
        Check whether a stored token exists and Google still accepts it.

        Network failures and provider 5xx responses count as "not valid"
        and are never raised; the token is kept. A token the provider
        rejects (4xx) is cleared from the store.

        Returns:
            True only if the liveness check succeeded.
        """
        token = await self.get_token()
        if not token:
            return False

        try:
            response = await self._get(
                config.google.token_info_uri,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Token liveness check failed: {e}")
            return False

        if response.is_server_error:
            logger.warning(
                f"Token liveness check failed: provider returned {response.status_code}"
            )
            return False

        if not response.is_success:
            logger.info(
                f"Stored token rejected by provider (status={response.status_code}), clearing"
            )
            await self.clear_token()
            return False

        return True

    @property
    def pending_consents(self) -> int:
        """Consent states held; expired ones are dropped on the next begin_consent()."""
        return len(self._pending_states)

    def _expired(self, issued: float) -> bool:
        return self._clock() - issued > self.state_ttl

    def _prune_states(self) -> None:
        """Drop states whose consent was never completed."""
        stale = [s for s, issued in self._pending_states.items() if self._expired(issued)]
        for state in stale:
            del self._pending_states[state]
        if stale:
            logger.info(f"Pruned {len(stale)} expired consent state(s)")

    def begin_consent(self) -> tuple[str, str]:
        """
        Start a consent flow.

        Returns:
            Tuple of (consent_url, state). The state must come back on the
            redirect within state_ttl seconds for complete_consent() to
            accept it.
        """
        self._prune_states()
        state = secrets.token_urlsafe(24)
        self._pending_states[state] = self._clock()
        url = self.consent_flow.authorization_url(state)
        logger.info(f"Consent flow started ({self.pending_consents} pending)")
        return url, state

    async def complete_consent(
        self,
        state: Optional[str],
        code: Optional[str] = None,
        error: Optional[str] = None
    ) -> str:
        """
        Finish a consent flow from the provider's redirect parameters.

        Args:
            state: State echoed back by the provider.
            code: Authorization code (present on grant).
            error: OAuth error code (present on denial).

        Returns:
            The newly stored access token.

        Raises:
            AuthDenied: Consent was declined, or state is unknown, reused
                or expired.
            AuthUnavailable: The token endpoint failed.
        """
        issued = self._pending_states.pop(state, None) if state else None
        if issued is None or self._expired(issued):
            logger.warning("Consent callback with unknown or expired state")
            raise AuthDenied("Unknown or expired consent state")

        if error:
            logger.info(f"User declined consent: {error}")
            raise AuthDenied(error)
        if not code:
            raise AuthDenied("Consent response carried no authorization code")

        grant = await self.consent_flow.exchange_code(code)
        await self.set_token(grant.access_token, grant.expires_in)
        logger.info("Google account connected")
        return grant.access_token

    async def acquire_token(self, prompt: ConsentPrompt) -> str:
        """
        Run the interactive consent flow end to end.

        Hands the consent URL to ``prompt`` and suspends until it returns the
        redirect parameters, then exchanges the code and stores the token.

        Args:
            prompt: Async callable showing the URL to the user and returning
                the redirect's query parameters (state, code or error).

        Returns:
            The newly stored access token.
        """
        url, state = self.begin_consent()
        try:
            params: Mapping[str, Any] = await prompt(url)
            return await self.complete_consent(
                params.get("state"),
                code=params.get("code"),
                error=params.get("error"),
            )
        finally:
            self._pending_states.pop(state, None)
