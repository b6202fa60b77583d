"""Tests for the T3 indicator engine."""

import pytest

from trendwatch.indicators.t3 import bar_colors, ema, t3_coefficients, tillson_t3_series
from trendwatch.models.trend import BarColor


class TestEma:
    """Tests for the seeded exponential moving average."""

    def test_seeded_with_first_value(self):
        """Test that the first output equals the first input and later values follow the multiplier."""
        # length 3 -> multiplier 0.5
        assert ema([1.0, 2.0, 3.0], 3) == pytest.approx([1.0, 1.5, 2.25])

    def test_matches_recurrence(self):
        """Test that each value follows prev + (2 / (length + 1)) * (x - prev)."""
        values = [100.0, 103.5, 101.0, 99.25, 104.0, 110.5, 108.0]
        m = 2 / (5 + 1)
        expected = [values[0]]
        for x in values[1:]:
            expected.append(x * m + expected[-1] * (1 - m))

        result = ema(values, 5)

        assert isinstance(result, list)
        assert result == pytest.approx(expected)

    def test_empty_series(self):
        """Test that an empty series yields an empty result."""
        assert ema([], 8) == []

    def test_constant_series(self):
        """Test that the EMA of a constant series is the constant."""
        assert ema([42.0] * 50, 8) == pytest.approx([42.0] * 50)


class TestTillsonT3:
    """Tests for the T3 series."""

    def test_coefficients_sum_to_one(self):
        """Test that the T3 weights sum to one for any volume factor."""
        for a in (0.1, 0.618, 0.7, 0.9):
            assert sum(t3_coefficients(a)) == pytest.approx(1.0)

    def test_coefficients_values(self):
        """Test the T3 weights for a = 0.7."""
        c1, c2, c3, c4 = t3_coefficients(0.7)
        assert c1 == pytest.approx(-0.343)
        assert c2 == pytest.approx(2.499)
        assert c3 == pytest.approx(-6.069)
        assert c4 == pytest.approx(4.913)

    @pytest.mark.parametrize("length,a", [(8, 0.7), (5, 0.618)])
    def test_constant_prices(self, length, a):
        """Test that constant prices produce a constant T3 series."""
        n = 30
        result = tillson_t3_series([110.0] * n, [90.0] * n, [100.0] * n, length, a)
        # typical price = (110 + 90 + 200) / 4
        assert result == pytest.approx([100.0] * n)

    @pytest.mark.parametrize("n", [0, 1, 2, 20, 200])
    def test_output_length_matches_input(self, n):
        """Test that the output is index-aligned to the input."""
        closes = [100.0 + i for i in range(n)]
        result = tillson_t3_series(
            [c + 1 for c in closes], [c - 1 for c in closes], closes, 8, 0.7
        )
        assert len(result) == n

    def test_unequal_lengths_raise(self):
        """Test that misaligned inputs are rejected."""
        with pytest.raises(ValueError):
            tillson_t3_series([1.0, 2.0], [1.0], [1.0, 2.0], 8, 0.7)

    def test_weighted_typical_price_source(self):
        """Test that a single bar yields its weighted typical price."""
        result = tillson_t3_series([12.0], [4.0], [10.0], 8, 0.7)
        assert result == pytest.approx([(12.0 + 4.0 + 20.0) / 4])

    def test_linear_trend_ends_rising(self):
        """Test that a long linear uptrend produces a rising T3 at the end."""
        closes = [1000.0 + i for i in range(200)]
        result = tillson_t3_series(closes, closes, closes, 8, 0.7)
        assert result[-1] > result[-2]
        assert result[-1] - result[-2] == pytest.approx(1.0, rel=1e-3)


class TestBarColors:
    """Tests for bar color classification."""

    def test_first_bar_neutral(self):
        """Test that the first element has no predecessor and is neutral."""
        assert bar_colors([5.0]) == [BarColor.NEUTRAL]
        assert bar_colors([5.0, 6.0])[0] == BarColor.NEUTRAL

    def test_rising_and_falling(self):
        """Test classification against the previous value."""
        colors = bar_colors([1.0, 2.0, 1.5, 3.0])
        assert colors == [
            BarColor.NEUTRAL,
            BarColor.RISING,
            BarColor.FALLING,
            BarColor.RISING,
        ]

    def test_equal_values_are_falling(self):
        """Test that a tie is classified as falling."""
        assert bar_colors([2.0, 2.0, 2.0]) == [
            BarColor.NEUTRAL,
            BarColor.FALLING,
            BarColor.FALLING,
        ]

    def test_empty_series(self):
        """Test that an empty series has no colors."""
        assert bar_colors([]) == []
