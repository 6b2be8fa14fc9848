"""
Keyword Search Analytics Fetcher.

Two-stage retrieval against Search Console:
1. One aggregate query (dimension: query) filtered to the tracked keywords.
2. One follow-up query (dimensions: query, date) per matched keyword,
   issued concurrently under a semaphore, then joined to the aggregate rows.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

import httpx

from analytics.models import DateRange, KeywordResult, SearchAnalyticsRow
from analytics.normalizer import (
    build_keyword_filter,
    clean_keywords,
    join_keyword_result,
    normalize_site_url,
    parse_rows,
    query_filter,
)
from auth.credentials import CredentialHolder
from auth.exceptions import Unauthenticated
from clients.search_console import SearchConsoleClient
from config import config

logger = logging.getLogger(__name__)

DIMENSIONS_AGGREGATE = ["query"]
DIMENSIONS_DAILY = ["query", "date"]


class KeywordAnalyticsFetcher:
    """
    Fetches per-keyword clicks, impressions and position for a site.

    Reads the bearer token from the injected CredentialHolder but never
    manages its lifecycle.
    """

    def __init__(
        self,
        credentials: CredentialHolder,
        http_client: Optional[httpx.AsyncClient] = None,
        row_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            credentials: Holder of the Search Console bearer token.
            http_client: Optional shared HTTP client (one is opened per
                fetch when omitted).
            row_limit: Rows per query (default: config, 100).
            max_concurrency: Max follow-up queries in flight (default: config).
        """
        self.credentials = credentials
        self._http_client = http_client
        self.row_limit = row_limit or config.analytics.row_limit
        self.max_concurrency = max(1, max_concurrency or config.analytics.max_concurrency)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[SearchConsoleClient]:
        if self._http_client is not None:
            yield SearchConsoleClient(self._http_client)
            return
        async with httpx.AsyncClient() as http_client:
            yield SearchConsoleClient(http_client)

    async def fetch_keyword_results(
        self,
        date_range: DateRange,
        site: str,
        keywords: Sequence[str]
    ) -> list[KeywordResult]:
        """
        Fetch aggregate and daily metrics for the given keywords.

        Args:
            date_range: Inclusive date range.
            site: Site identifier; a missing scheme defaults to https.
            keywords: Tracked keyword strings (non-empty).

        Returns:
            One KeywordResult per keyword the provider reported, in the
            aggregate response's order. Keywords without data are absent.

        Raises:
            ValueError: If no keywords are given or any is blank.
            Unauthenticated: If no token is stored (before any request).
            AnalyticsQueryFailed: If any query fails; no partial results.
        """
        keywords = clean_keywords(keywords)

        token = await self.credentials.get_token()
        if not token:
            logger.warning("Keyword fetch attempted without an access token")
            raise Unauthenticated()

        site_url = normalize_site_url(site)
        logger.info(
            f"Fetching keyword analytics: site={site_url}, keywords={len(keywords)}, "
            f"{date_range.start_iso} to {date_range.end_iso}"
        )

        async with self._client() as client:
            response = await client.query(
                site_url,
                token,
                start_date=date_range.start_iso,
                end_date=date_range.end_iso,
                dimensions=DIMENSIONS_AGGREGATE,
                filters=query_filter(build_keyword_filter(keywords), operator="includingRegex"),
                row_limit=self.row_limit,
            )
            aggregate_rows = parse_rows(response)

            if not aggregate_rows:
                logger.info("No data returned from aggregate query")
                return []

            logger.info(f"Aggregate query matched {len(aggregate_rows)} keywords")
            daily = await self._fetch_daily_rows(client, site_url, token, date_range, aggregate_rows)

        results = [
            join_keyword_result(row, daily_rows)
            for row, daily_rows in zip(aggregate_rows, daily)
        ]
        logger.info(f"Keyword analytics assembled for {len(results)} keywords")
        return results

    async def _fetch_daily_rows(
        self,
        client: SearchConsoleClient,
        site_url: str,
        token: str,
        date_range: DateRange,
        aggregate_rows: list[SearchAnalyticsRow]
    ) -> list[list[SearchAnalyticsRow]]:
        """
        Run one follow-up query per aggregate row, at most max_concurrency at once.

        All-or-nothing: the first failure cancels the remaining queries and
        is re-raised.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch_one(keyword: str) -> list[SearchAnalyticsRow]:
            async with semaphore:
                response = await client.query(
                    site_url,
                    token,
                    start_date=date_range.start_iso,
                    end_date=date_range.end_iso,
                    dimensions=DIMENSIONS_DAILY,
                    filters=query_filter(keyword, operator="equals"),
                    row_limit=self.row_limit,
                )
            return parse_rows(response)

        tasks = [asyncio.create_task(fetch_one(row.keyword)) for row in aggregate_rows]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
