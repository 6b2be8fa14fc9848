"""
Unit tests for search analytics normalization helpers.
"""

import re
from datetime import date

import pytest

from analytics.models import DailyMetric, DateRange, KeywordResult, SearchAnalyticsRow
from analytics.normalizer import (
    build_keyword_filter,
    clean_keywords,
    escape_keyword,
    join_keyword_result,
    normalize_site_url,
    parse_rows,
    sort_daily_data,
)


class TestSiteNormalization:

    def test_adds_https_scheme(self):
        assert normalize_site_url("example.com") == "https://example.com"

    def test_keeps_existing_scheme(self):
        assert normalize_site_url("http://example.com/") == "http://example.com/"
        assert normalize_site_url("https://www.example.com") == "https://www.example.com"

    def test_strips_whitespace(self):
        assert normalize_site_url("  example.com ") == "https://example.com"

    def test_blank_site_rejected(self):
        with pytest.raises(ValueError):
            normalize_site_url("   ")


class TestKeywordFilter:

    @pytest.mark.parametrize("keyword", [
        "c++",
        "a.b*",
        "(cheap)|fast",
        "[deal]",
        "$5 ^off?",
        "{x}",
        r"back\slash",
    ])
    def test_escaped_keyword_matches_literally(self, keyword):
        assert re.fullmatch(escape_keyword(keyword), keyword)

    def test_plus_is_not_a_quantifier(self):
        pattern = build_keyword_filter(["c++"])
        assert re.fullmatch(pattern, "c++")
        assert not re.fullmatch(pattern, "c")
        assert not re.fullmatch(pattern, "cc")

    def test_dot_and_star_are_not_wildcards(self):
        pattern = build_keyword_filter(["a.b*"])
        assert not re.fullmatch(pattern, "axb")
        assert not re.fullmatch(pattern, "a.bbbb")
        assert not re.fullmatch(pattern, "a.")

    def test_alternation_matches_each_keyword(self):
        pattern = build_keyword_filter(["plumber near me", "c++", "a|b"])
        assert pattern == r"plumber near me|c\+\+|a\|b"
        for keyword in ("plumber near me", "c++", "a|b"):
            assert re.fullmatch(pattern, keyword)
        assert not re.fullmatch(pattern, "a")

    def test_plain_text_unchanged(self):
        assert escape_keyword("emergency plumber") == "emergency plumber"

    def test_keywords_are_stripped(self):
        assert clean_keywords(["  plumber ", "c++\t"]) == ["plumber", "c++"]
        assert build_keyword_filter([" plumber near me "]) == "plumber near me"

    @pytest.mark.parametrize("keywords", [
        [],
        ["plumber", ""],
        ["plumber", "   "],
        ["\t"],
    ])
    def test_blank_keywords_rejected(self, keywords):
        with pytest.raises(ValueError):
            build_keyword_filter(keywords)

    def test_filter_never_has_empty_branch(self):
        pattern = build_keyword_filter(["plumber", "roofer"])
        assert not re.search(pattern, "random query")


class TestRowParsing:

    def test_missing_rows_key_means_no_rows(self):
        assert parse_rows({}) == []
        assert parse_rows({"rows": None}) == []

    def test_absent_numbers_stay_none_until_join(self):
        row = SearchAnalyticsRow.from_api({"keys": ["kw"]})
        assert row.clicks is None
        assert row.impressions is None
        assert row.position is None

    def test_numbers_coerced(self):
        row = SearchAnalyticsRow.from_api(
            {"keys": ["kw"], "clicks": 4.0, "impressions": 10, "position": 3})
        assert row.clicks == 4 and isinstance(row.clicks, int)
        assert row.position == 3.0 and isinstance(row.position, float)

    def test_join_defaults_to_zero(self):
        aggregate = SearchAnalyticsRow.from_api({"keys": ["kw"]})
        daily = [SearchAnalyticsRow.from_api({"keys": ["kw", "2024-01-02"]})]

        result = join_keyword_result(aggregate, daily)

        assert result == KeywordResult(
            keyword="kw",
            clicks=0,
            impressions=0,
            avg_position=0.0,
            daily_data=[DailyMetric(date="2024-01-02", clicks=0, impressions=0, position=0.0)],
        )


class TestDailyOrdering:

    def test_sort_daily_data_chronological(self):
        result = KeywordResult("kw", 0, 0, 0.0, daily_data=[
            DailyMetric("2024-02-10", 1, 1, 1.0),
            DailyMetric("2024-01-31", 1, 1, 1.0),
            DailyMetric("2024-02-01", 1, 1, 1.0),
        ])

        sort_daily_data([result])

        assert [d.date for d in result.daily_data] == ["2024-01-31", "2024-02-01", "2024-02-10"]


class TestDateRange:

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            DateRange(date(2024, 2, 1), date(2024, 1, 1))

    def test_single_day_range(self):
        day = DateRange(date(2024, 2, 1), date(2024, 2, 1))
        assert day.start_iso == day.end_iso == "2024-02-01"

    def test_last_n_days(self):
        window = DateRange.last_n_days(90, today=date(2024, 4, 30))
        assert window.end == date(2024, 4, 30)
        assert window.start == date(2024, 1, 31)

    def test_last_n_days_requires_positive(self):
        with pytest.raises(ValueError):
            DateRange.last_n_days(0)
