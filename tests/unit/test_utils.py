"""
Unit tests for formatting and hashing helpers.
"""

import pytest

from visibility_engine.utils import format_number_to_k, hash_djb2, pct


class TestHashDjb2:
    """Tests for hash_djb2."""

    def test_empty(self):
        """Test that empty input hashes to an empty string."""
        assert hash_djb2("") == ""
        assert hash_djb2(None) == ""

    def test_known_values(self):
        """Test digests computed by hand."""
        assert hash_djb2("a") == "2b606"
        assert hash_djb2("ab") == "597728"

    def test_surrogate_pairs(self):
        """Test that characters outside the BMP hash as two code units."""
        assert hash_djb2("\U0001F600") == "762822"

    def test_wraps_to_32_bits(self):
        """Test that long input stays within 8 hex digits."""
        assert len(hash_djb2("content " * 1000)) <= 8

    def test_deterministic(self):
        """Test that equal text hashes equally and different text differently."""
        assert hash_djb2("same text") == hash_djb2("same text")
        assert hash_djb2("same text") != hash_djb2("other text")


class TestPct:
    """Tests for pct."""

    def test_formats_ratio(self):
        """Test one-decimal percentages."""
        assert pct(0.425) == "42.5%"
        assert pct(1) == "100.0%"
        assert pct(0) == "0.0%"

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite(self, value):
        """Test the placeholder for non-finite input."""
        assert pct(value) == "–"


class TestFormatNumberToK:
    """Tests for format_number_to_k."""

    @pytest.mark.parametrize(
        "num,expected",
        [
            (0, "0"),
            (999, "999"),
            (9999, "9999"),
            (10000, "10K"),
            (12345, "12.3K"),
            (1_000_000, "1M"),
            (1_500_000, "1.5M"),
        ],
    )
    def test_formatting(self, num, expected):
        """Test plain, K and M notation."""
        assert format_number_to_k(num) == expected
