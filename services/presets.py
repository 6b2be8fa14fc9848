"""
Shareable preset URLs.

A preset is the business details plus the ordered keyword list, encoded
as query parameters: ``name``, ``location``, ``website`` and ``kw0``,
``kw1``, ... Decoding scans keyword indices upward until one is missing.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

BUSINESS_FIELDS = ("name", "location", "website")
KEYWORD_PARAM = "kw"


@dataclass
class Business:
    """Business the dashboard reports on."""

    name: str = ""
    location: str = ""
    website: str = ""


@dataclass
class Preset:
    """Decoded preset: business details and keywords in their original order."""

    business: Business = field(default_factory=Business)
    keywords: list[str] = field(default_factory=list)


def encode_preset(business: Business, keywords: Sequence[str]) -> str:
    """
    Encode a business and keyword list as a query string.

    Empty business fields are omitted.
    """
    params: list[tuple[str, str]] = []
    for name in BUSINESS_FIELDS:
        value = getattr(business, name)
        if value:
            params.append((name, value))
    for index, keyword in enumerate(keywords):
        params.append((f"{KEYWORD_PARAM}{index}", keyword))
    return urlencode(params)


def decode_preset(query: str) -> Preset:
    """
    Decode a preset query string.

    Args:
        query: Query string, with or without a leading "?".

    Returns:
        Preset with missing business fields as "" and keywords read from
        kw0 until the first absent or empty index.
    """
    params = parse_qs(query.lstrip("?"), keep_blank_values=True)

    def first(key: str) -> str:
        values = params.get(key)
        return values[0] if values else ""

    business = Business(**{name: first(name) for name in BUSINESS_FIELDS})

    keywords: list[str] = []
    index = 0
    while True:
        keyword = first(f"{KEYWORD_PARAM}{index}")
        if not keyword:
            break
        keywords.append(keyword)
        index += 1

    logger.debug(f"Preset decoded: {len(keywords)} keywords")
    return Preset(business=business, keywords=keywords)


def build_preset_url(base_url: str, business: Business, keywords: Sequence[str]) -> str:
    """Attach an encoded preset to a dashboard URL, replacing any query/fragment."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode_preset(business, keywords), ""))
