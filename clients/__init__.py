"""
Google Search Console API clients.

Provides bearer-authenticated access to the searchAnalytics API.
"""

from .search_console import AnalyticsQueryFailed, SearchConsoleClient

__all__ = ["AnalyticsQueryFailed", "SearchConsoleClient"]
