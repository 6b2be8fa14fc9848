"""
Redis-backed storage slot for the Google access token.

The dashboard keeps exactly one bearer token under a fixed key. Expiry
is delegated to Redis so an expired token simply disappears.
"""

import logging
from typing import Any, Optional

import redis.asyncio as redis

from config import config

logger = logging.getLogger(__name__)


class RedisTokenStore:
    """
    Single-slot token store using Redis.

    Key layout: ``<prefix>:google_access_token``.
    """

    TOKEN_KEY = "google_access_token"

    def __init__(
        self,
        client: Optional[Any] = None,
        key_prefix: Optional[str] = None
    ) -> None:
        """
        Initialize the token store.

        Args:
            client: Optional redis.asyncio client (built from config if omitted).
            key_prefix: Optional key namespace (defaults to config).
        """
        self._client = client
        prefix = key_prefix or config.redis.key_prefix
        self.key = f"{prefix}:{self.TOKEN_KEY}"

    def _ensure_client(self) -> Any:
        """Lazily build the Redis client; connection happens on first command."""
        if self._client is None:
            self._client = redis.from_url(
                config.redis.url,
                encoding="utf-8",
                decode_responses=True
            )
            logger.info("Redis token store client created")
        return self._client

    async def get(self) -> Optional[str]:
        """Return the stored token, or None if the slot is empty."""
        client = self._ensure_client()
        return await client.get(self.key)

    async def set(self, token: str, expires_in: Optional[int] = None) -> None:
        """
        Store a token, replacing any previous one.

        Args:
            token: Bearer access token.
            expires_in: Optional lifetime in seconds reported by the provider.
        """
        client = self._ensure_client()
        await client.set(self.key, token, ex=expires_in if expires_in else None)
        logger.info(f"Access token stored (expires_in={expires_in})")

    async def delete(self) -> None:
        """Remove the stored token. Removing an empty slot is a no-op."""
        client = self._ensure_client()
        await client.delete(self.key)
        logger.info("Access token cleared")

    async def close(self) -> None:
        """Close the underlying Redis connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
