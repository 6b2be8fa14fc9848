"""
Search analytics request/response normalization.

Builds the keyword filter expressions sent to Search Console and converts
raw response rows into KeywordResult records.
"""

import logging
import re
from typing import Any, Sequence

from analytics.models import DailyMetric, KeywordResult, SearchAnalyticsRow

logger = logging.getLogger(__name__)

# Characters with special meaning in the provider's regex dialect
_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\]")


def normalize_site_url(site: str) -> str:
    """
    Canonicalize a site identifier into an absolute URL.

    Example:
        "example.com" -> "https://example.com"
        "http://example.com" -> "http://example.com"
    """
    site = site.strip()
    if not site:
        raise ValueError("Website is required")
    if site.startswith("http"):
        return site
    return f"https://{site}"


def escape_keyword(keyword: str) -> str:
    """Escape regex metacharacters so the keyword matches literally."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), keyword)


def clean_keywords(keywords: Sequence[str]) -> list[str]:
    """
    Strip surrounding whitespace from each keyword.

    Raises:
        ValueError: If the list is empty or any keyword is blank. A blank
            branch in the alternation would match every query.
    """
    if not keywords:
        raise ValueError("At least one keyword is required")
    cleaned = [k.strip() for k in keywords]
    if not all(cleaned):
        logger.warning(f"Rejected keyword list with blank entries: {list(keywords)!r}")
        raise ValueError("Keywords must not be blank")
    return cleaned


def build_keyword_filter(keywords: Sequence[str]) -> str:
    """Alternation expression matching any of the keywords."""
    return "|".join(escape_keyword(k) for k in clean_keywords(keywords))


def query_filter(expression: str, operator: str = "equals") -> list[dict[str, str]]:
    """Single query-dimension filter for a dimensionFilterGroup."""
    return [{
        "dimension": "query",
        "operator": operator,
        "expression": expression,
    }]


def parse_rows(response: dict[str, Any]) -> list[SearchAnalyticsRow]:
    """Parse the ``rows`` of a response; a missing key means no rows."""
    return [SearchAnalyticsRow.from_api(row) for row in response.get("rows") or []]


def to_daily_metric(row: SearchAnalyticsRow) -> DailyMetric:
    """Convert a (query, date) row, defaulting absent numbers to zero."""
    return DailyMetric(
        date=row.keys[1] if len(row.keys) > 1 else "",
        clicks=row.clicks or 0,
        impressions=row.impressions or 0,
        position=row.position or 0.0,
    )


def join_keyword_result(
    aggregate: SearchAnalyticsRow,
    daily_rows: Sequence[SearchAnalyticsRow]
) -> KeywordResult:
    """
    Join an aggregate row with its follow-up rows.

    Daily rows keep the provider's order.
    """
    return KeywordResult(
        keyword=aggregate.keyword,
        clicks=aggregate.clicks or 0,
        impressions=aggregate.impressions or 0,
        avg_position=aggregate.position or 0.0,
        daily_data=[to_daily_metric(row) for row in daily_rows],
    )


def sort_daily_data(results: Sequence[KeywordResult]) -> list[KeywordResult]:
    """Order every result's daily data chronologically (ISO dates sort as text)."""
    for result in results:
        result.daily_data.sort(key=lambda d: d.date)
    return list(results)

