#!/usr/bin/env python3
"""
Connect a Google account from the terminal.

Prints the consent URL, then asks for the address the browser was
redirected to and stores the resulting token in Redis.
"""

import asyncio
import os
import sys
from urllib.parse import parse_qsl, urlsplit

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from auth.credentials import CredentialHolder
from auth.exceptions import AuthDenied, AuthUnavailable
from auth.token_store import RedisTokenStore


async def terminal_prompt(url: str) -> dict[str, str]:
    """Show the consent URL and read back the redirect URL."""
    print("Open this URL in a browser and approve access:\n")
    print(url)
    print()
    redirected = await asyncio.to_thread(input, "Paste the URL you were redirected to: ")
    return dict(parse_qsl(urlsplit(redirected.strip()).query))


async def connect() -> None:
    store = RedisTokenStore()
    holder = CredentialHolder(store)
    try:
        await holder.acquire_token(terminal_prompt)
        print("✓ Google account connected")
    finally:
        await store.close()


def main():
    try:
        asyncio.run(connect())
    except AuthDenied as e:
        print(f"✗ Google sign-in was denied: {e}")
        sys.exit(1)
    except AuthUnavailable as e:
        print(f"✗ Could not reach Google: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
