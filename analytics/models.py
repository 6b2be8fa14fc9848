"""
Data structures for keyword search analytics.

Raw API rows keep their numbers Optional; defaults are applied only when
rows are joined into KeywordResult, so "field absent" stays visible up to
that boundary.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"Invalid date range: start {self.start} is after end {self.end}"
            )

    @classmethod
    def last_n_days(cls, days: int, today: Optional[date] = None) -> "DateRange":
        """Range ending today and starting ``days`` days earlier."""
        if days < 1:
            raise ValueError("days must be at least 1")
        end = today or datetime.now(timezone.utc).date()
        return cls(start=end - timedelta(days=days), end=end)

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()


@dataclass
class SearchAnalyticsRow:
    """One row of a searchAnalytics response, numbers as sent by the API."""

    keys: list[str]
    clicks: Optional[int] = None
    impressions: Optional[int] = None
    position: Optional[float] = None

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> "SearchAnalyticsRow":
        clicks = row.get("clicks")
        impressions = row.get("impressions")
        position = row.get("position")
        return cls(
            keys=list(row.get("keys", [])),
            clicks=int(clicks) if clicks is not None else None,
            impressions=int(impressions) if impressions is not None else None,
            position=float(position) if position is not None else None,
        )

    @property
    def keyword(self) -> str:
        return self.keys[0] if self.keys else ""


@dataclass
class DailyMetric:
    """Metrics for one keyword on one day."""

    date: str
    clicks: int
    impressions: int
    position: float


@dataclass
class KeywordResult:
    """Aggregate metrics for a keyword plus its daily breakdown."""

    keyword: str
    clicks: int
    impressions: int
    avg_position: float
    daily_data: list[DailyMetric] = field(default_factory=list)
