"""
Utility modules for Industry Analytics.

Centralized utilities to avoid code duplication.
"""

from industry_analytics.utils.matching import normalize_name, loose_match, match_strength
from industry_analytics.utils.serialization import (
    SerializableMixin,
    serialize_value,
    deserialize_value,
    compact_json,
)

__all__ = [
    # Matching
    "normalize_name",
    "loose_match",
    "match_strength",
    # Serialization
    "SerializableMixin",
    "serialize_value",
    "deserialize_value",
    "compact_json",
]
