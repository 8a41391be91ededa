"""
Tests for column name matching.
"""

import pytest

from industry_analytics.utils.matching import loose_match, match_strength, normalize_name


class TestNormalizeName:

    @pytest.mark.parametrize("raw,expected", [
        ("User_ID", "userid"),
        ("player-id", "playerid"),
        ("Order Total", "ordertotal"),
        ("  mrr ", "mrr"),
        ("", ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_name(raw) == expected


class TestLooseMatch:

    def test_exact_after_normalization(self):
        assert loose_match("Player-ID", "player_id") == 1.0

    def test_containment_either_way(self):
        assert loose_match("user_id_hash", "user_id") == pytest.approx(0.7)
        assert loose_match("mrr", "mrr_usd") == pytest.approx(0.7)

    def test_no_match(self):
        assert loose_match("revenue", "kills") == 0.0

    def test_empty_never_matches(self):
        assert loose_match("", "mrr") == 0.0
        assert loose_match("mrr", "") == 0.0
        assert loose_match("__", "mrr") == 0.0


class TestMatchStrength:

    def test_exact_on_meaning_or_column(self):
        assert match_strength("mrr", "monthly", "mrr") == 1.0
        assert match_strength("", "MRR", "mrr") == 1.0

    def test_column_contains_pattern(self):
        assert match_strength("", "total_mrr_usd", "mrr") == pytest.approx(0.8)

    def test_pattern_contains_column(self):
        assert match_strength("", "level", "player_level") == pytest.approx(0.6)

    def test_strongest_relation_wins(self):
        assert match_strength("score", "high_score_value", "high_score") == pytest.approx(0.8)

    def test_empty_strings(self):
        assert match_strength("", "", "mrr") == 0.0
        assert match_strength("mrr", "mrr", "") == 0.0

    def test_no_match(self):
        assert match_strength("arr", "arr", "kills") == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
