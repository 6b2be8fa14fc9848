"""
Shared pytest fixtures for the keyword tracker test suite.

Provides reusable fixtures for:
- In-memory token store
- Mocked Google endpoints (httpx.MockTransport)
- Credential holders wired to the mocks
- In-memory SQLite sessions
"""

import os

# Must be set before config / db.session are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import json
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth.consent import GoogleConsentFlow
from auth.credentials import CredentialHolder
from db.base import Base
import db.models  # noqa: F401  (registers tables on Base.metadata)


# =============================================================================
# Token Store
# =============================================================================

class FakeTokenStore:
    """Dict-backed stand-in for RedisTokenStore."""

    def __init__(self, token: Optional[str] = None) -> None:
        self.token = token
        self.expires_in: Optional[int] = None
        self.delete_calls = 0

    async def get(self) -> Optional[str]:
        return self.token

    async def set(self, token: str, expires_in: Optional[int] = None) -> None:
        self.token = token
        self.expires_in = expires_in

    async def delete(self) -> None:
        self.delete_calls += 1
        self.token = None


@pytest.fixture
def token_store():
    """Empty token store."""
    return FakeTokenStore()


@pytest.fixture
def authed_store():
    """Token store already holding a token."""
    return FakeTokenStore(token="ya29.test-token")


# =============================================================================
# Google Endpoint Mocks
# =============================================================================

class FakeGoogle:
    """
    Programmable stand-in for Google's tokeninfo, token and
    searchAnalytics endpoints.

    Attributes:
        aggregate_rows: Rows returned by the aggregate (query) report.
        daily_rows: Rows per keyword returned by the (query, date) report.
        fail_keywords: Keyword -> status for failing follow-up queries.
    """

    def __init__(self) -> None:
        self.aggregate_rows: list[dict[str, Any]] = []
        self.aggregate_status = 200
        self.daily_rows: dict[str, list[dict[str, Any]]] = {}
        self.fail_keywords: dict[str, int] = {}
        self.tokeninfo_status = 200
        self.token_response = httpx.Response(
            200, json={"access_token": "ya29.fresh-token", "expires_in": 3599})
        self.raise_on: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.query_bodies: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if "tokeninfo" in url:
            if "tokeninfo" in self.raise_on:
                raise httpx.ConnectError("tokeninfo unreachable", request=request)
            return httpx.Response(self.tokeninfo_status, json={"expires_in": 3000})

        if url.startswith("https://oauth2.googleapis.com/token"):
            if "token" in self.raise_on:
                raise httpx.ConnectError("token endpoint unreachable", request=request)
            return self.token_response

        body = json.loads(request.content)
        self.query_bodies.append(body)

        if body["dimensions"] == ["query"]:
            if self.aggregate_status != 200:
                return httpx.Response(self.aggregate_status, text="aggregate failed")
            return httpx.Response(
                200, json={"rows": self.aggregate_rows} if self.aggregate_rows else {})

        keyword = body["dimensionFilterGroups"][0]["filters"][0]["expression"]
        if keyword in self.fail_keywords:
            return httpx.Response(self.fail_keywords[keyword], text="backend error")
        rows = self.daily_rows.get(keyword)
        return httpx.Response(200, json={"rows": rows} if rows else {})

    def followup_bodies(self) -> list[dict[str, Any]]:
        return [b for b in self.query_bodies if b["dimensions"] == ["query", "date"]]


@pytest.fixture
def fake_google():
    return FakeGoogle()


@pytest.fixture
def http_client(fake_google):
    """AsyncClient routed to FakeGoogle."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_google.handler))


@pytest.fixture
def consent_flow(http_client):
    return GoogleConsentFlow(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://localhost:3001/api/auth/callback",
        scopes=["https://www.googleapis.com/auth/webmasters.readonly"],
        http_client=http_client,
    )


@pytest.fixture
def holder(token_store, consent_flow, http_client):
    """Credential holder with no token stored."""
    return CredentialHolder(token_store, consent_flow=consent_flow, http_client=http_client)


@pytest.fixture
def authed_holder(authed_store, consent_flow, http_client):
    """Credential holder with a token stored."""
    return CredentialHolder(authed_store, consent_flow=consent_flow, http_client=http_client)


def state_from_url(url: str) -> str:
    """Extract the OAuth state parameter from a consent URL."""
    return parse_qs(urlsplit(url).query)["state"][0]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def db_session():
    """Fresh in-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
