"""
Column Name Matching Utilities.

Pattern matching shared by the registry lookup and the industry detector.
"""

import re


_SEPARATORS = re.compile(r"[_\-\s]")

EXACT_MATCH = 1.0
CONTAINS_MATCH = 0.8
CONTAINED_MATCH = 0.6
LOOSE_MATCH = 0.7


def normalize_name(name: str) -> str:
    """Lowercase and strip underscores, hyphens and whitespace."""
    return _SEPARATORS.sub("", name.lower())


def loose_match(name: str, pattern: str) -> float:
    """
    Compare two names after normalization.

    Returns:
        1.0 for equal names, 0.7 when either contains the other, else 0.0
    """
    normalized_name = normalize_name(name)
    normalized_pattern = normalize_name(pattern)

    if not normalized_name or not normalized_pattern:
        return 0.0
    if normalized_name == normalized_pattern:
        return EXACT_MATCH
    if normalized_pattern in normalized_name or normalized_name in normalized_pattern:
        return LOOSE_MATCH
    return 0.0


def match_strength(meaning: str, column: str, pattern: str) -> float:
    """
    Score how well a column observation matches one semantic-type pattern.

    Comparison is case-insensitive. Empty strings never match.

    Returns:
        1.0 when meaning or column equals the pattern,
        0.8 when meaning or column contains the pattern,
        0.6 when the pattern contains meaning or column,
        0.0 otherwise
    """
    pattern = pattern.lower()
    if not pattern:
        return 0.0

    candidates = [c for c in (meaning.lower(), column.lower()) if c]

    if pattern in candidates:
        return EXACT_MATCH
    if any(pattern in c for c in candidates):
        return CONTAINS_MATCH
    if any(c in pattern for c in candidates):
        return CONTAINED_MATCH
    return 0.0
