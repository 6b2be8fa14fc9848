"""
Services module for the keyword tracker.

Provides the keyword store and shareable preset encoding.
"""

from .keyword_store import KeywordStore
from .presets import Business, Preset, build_preset_url, decode_preset, encode_preset

__all__ = [
    "Business",
    "KeywordStore",
    "Preset",
    "build_preset_url",
    "decode_preset",
    "encode_preset",
]
