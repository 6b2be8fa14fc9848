"""
Unit tests for shareable preset URLs.
"""

from urllib.parse import parse_qs, urlsplit

from services.presets import Business, build_preset_url, decode_preset, encode_preset


BUSINESS = Business(name="Joe's Plumbing & Heating", location="Austin, TX", website="joesplumbing.com")
KEYWORDS = ["plumber near me", "emergency plumber", "c++ & more", "zürich=heizung"]


class TestRoundTrip:

    def test_round_trip_preserves_business_and_order(self):
        preset = decode_preset(encode_preset(BUSINESS, KEYWORDS))

        assert preset.business == BUSINESS
        assert preset.keywords == KEYWORDS

    def test_round_trip_with_leading_question_mark(self):
        preset = decode_preset("?" + encode_preset(BUSINESS, KEYWORDS))

        assert preset.keywords == KEYWORDS

    def test_round_trip_without_keywords(self):
        preset = decode_preset(encode_preset(BUSINESS, []))

        assert preset.business == BUSINESS
        assert preset.keywords == []


class TestEncode:

    def test_indexed_keyword_params(self):
        params = parse_qs(encode_preset(Business(website="a.com"), ["x", "y"]))

        assert params == {"website": ["a.com"], "kw0": ["x"], "kw1": ["y"]}

    def test_empty_business_fields_omitted(self):
        assert encode_preset(Business(), ["x"]) == "kw0=x"


class TestDecode:

    def test_scan_stops_at_first_missing_index(self):
        preset = decode_preset("kw0=first&kw1=second&kw3=orphan")

        assert preset.keywords == ["first", "second"]

    def test_scan_stops_at_empty_value(self):
        preset = decode_preset("kw0=first&kw1=&kw2=third")

        assert preset.keywords == ["first"]

    def test_missing_business_fields_are_blank(self):
        preset = decode_preset("kw0=x")

        assert preset.business == Business()
        assert preset.keywords == ["x"]

    def test_empty_query(self):
        preset = decode_preset("")

        assert preset.business == Business()
        assert preset.keywords == []


class TestBuildUrl:

    def test_replaces_existing_query(self):
        url = build_preset_url("https://dash.example.com/app?old=1#frag", BUSINESS, ["x"])

        parts = urlsplit(url)
        assert parts.scheme == "https"
        assert parts.netloc == "dash.example.com"
        assert parts.path == "/app"
        assert parts.fragment == ""
        assert decode_preset(parts.query).keywords == ["x"]
