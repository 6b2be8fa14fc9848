"""
Analytics module for the keyword tracker.

Provides keyword search analytics fetching and normalization.
"""

from .keyword_fetcher import KeywordAnalyticsFetcher
from .models import DailyMetric, DateRange, KeywordResult, SearchAnalyticsRow
from .normalizer import clean_keywords, normalize_site_url, sort_daily_data

__all__ = [
    "DailyMetric",
    "DateRange",
    "KeywordAnalyticsFetcher",
    "KeywordResult",
    "SearchAnalyticsRow",
    "clean_keywords",
    "normalize_site_url",
    "sort_daily_data",
]
