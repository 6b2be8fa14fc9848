"""
Google Search Console searchAnalytics API client.

Issues authenticated searchAnalytics.query calls over an injected
httpx.AsyncClient so a single connection pool serves the whole
aggregate + follow-up fan-out.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from config import config

logger = logging.getLogger(__name__)


class AnalyticsQueryFailed(Exception):
    """Non-success HTTP response from the searchAnalytics endpoint."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Search Console API error: status {status} - {body}")
        self.status = status
        self.body = body


class SearchConsoleClient:
    """
    Search Console searchAnalytics client using a bearer token.

    The token is passed per call; this client never reads or refreshes
    credentials on its own.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: Optional[str] = None
    ) -> None:
        """
        Initialize the client.

        Args:
            http_client: Shared async HTTP client.
            base_url: Webmasters API root (defaults to config).
        """
        self.http_client = http_client
        self.base_url = (base_url or config.google.search_analytics_base_url).rstrip("/")

    def query_url(self, site_url: str) -> str:
        """Build the searchAnalytics endpoint for a site."""
        return f"{self.base_url}/sites/{quote(site_url, safe='')}/searchAnalytics/query"

    async def query(
        self,
        site_url: str,
        token: str,
        start_date: str,
        end_date: str,
        dimensions: list[str],
        filters: Optional[list[dict[str, str]]] = None,
        row_limit: Optional[int] = None
    ) -> dict[str, Any]:
        """
        Query the searchAnalytics report.

        Args:
            site_url: Normalized site URL (property identifier).
            token: OAuth bearer token.
            start_date: Start date in YYYY-MM-DD format.
            end_date: End date in YYYY-MM-DD format.
            dimensions: Report dimensions, e.g. ["query"] or ["query", "date"].
            filters: Optional dimension filters for a single filter group.
            row_limit: Maximum rows to return (defaults to config).

        Returns:
            Raw API response as dictionary. ``rows`` is omitted when empty.

        Raises:
            AnalyticsQueryFailed: If the API answers with a non-success status.
        """
        body: dict[str, Any] = {
            "startDate": start_date,
            "endDate": end_date,
            "dimensions": dimensions,
            "rowLimit": row_limit or config.analytics.row_limit,
        }
        if filters:
            body["dimensionFilterGroups"] = [{"filters": filters}]

        logger.info(
            f"Calling Search Console API: site={site_url}, "
            f"dimensions={dimensions}, startDate={start_date}, endDate={end_date}"
        )

        response = await self.http_client.post(
            self.query_url(site_url),
            json=body,
            headers={"Authorization": f"Bearer {token}"},
        )

        if not response.is_success:
            logger.error(
                f"Search Console API error: status={response.status_code}, "
                f"body={response.text[:200]}"
            )
            raise AnalyticsQueryFailed(response.status_code, response.text)

        data = response.json()
        logger.debug(f"Search Console API response received: {len(data.get('rows', []))} rows")
        return data
