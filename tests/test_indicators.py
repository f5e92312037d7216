"""Property-based tests for technical indicators.

SMA, EMA and Bollinger Bands are checked against pandas rolling/ewm
reference calculations.
"""

import math

import pandas as pd
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from stocksignal.indicators import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_bollinger_series,
    calculate_ema,
    calculate_macd,
    calculate_macd_series,
    calculate_rsi,
    calculate_rsi_series,
    calculate_sma,
    calculate_trend_strength,
    calculate_true_ranges,
)


# Strategy for generating realistic price series
@st.composite
def price_series(draw, min_length: int = 50, max_length: int = 200):
    """Generate a positive price series built from realistic daily moves."""
    length = draw(st.integers(min_value=min_length, max_value=max_length))
    base_price = draw(st.floats(min_value=50.0, max_value=500.0))

    changes = draw(st.lists(
        st.sampled_from([-0.05, -0.03, -0.02, -0.01, -0.005, 0.0,
                         0.005, 0.01, 0.02, 0.03, 0.05]),
        min_size=length - 1,
        max_size=length - 1,
    ))

    prices = [base_price]
    for change in changes:
        prices.append(max(0.01, prices[-1] * (1 + change)))
    return prices


class TestSMAAccuracy:
    """
    **Feature: stock-signal, Property 1: SMA Length and Values**

    *For any* series and period p <= len, the SMA has len - p + 1 values
    and matches pandas rolling mean.
    """

    @given(prices=price_series(min_length=20, max_length=120), period=st.integers(1, 20))
    @settings(max_examples=100, deadline=None)
    def test_sma_matches_pandas_rolling(self, prices: list[float], period: int):
        ours = calculate_sma(prices, period)
        ref = pd.Series(prices).rolling(period).mean().dropna().tolist()

        assert len(ours) == len(prices) - period + 1
        for a, b in zip(ours, ref):
            assert math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)

    def test_sma_shorter_than_period_is_empty(self):
        assert calculate_sma([1.0, 2.0], 3) == []

    def test_sma_rejects_non_positive_period(self):
        with pytest.raises(ValueError):
            calculate_sma([1.0, 2.0], 0)

    def test_sma_known_values(self):
        assert calculate_sma([1, 2, 3, 4, 5], 3) == [2.0, 3.0, 4.0]


class TestEMAAccuracy:
    """
    **Feature: stock-signal, Property 2: EMA Seeding and Smoothing**

    *For any* series, the EMA is seeded with the SMA of the first p values
    and then matches a non-adjusted pandas ewm with span p.
    """

    @given(prices=price_series(min_length=30, max_length=150), period=st.integers(2, 30))
    @settings(max_examples=100, deadline=None)
    def test_ema_matches_pandas_ewm(self, prices: list[float], period: int):
        ours = calculate_ema(prices, period)

        seed = sum(prices[:period]) / period
        ref = pd.Series([seed] + prices[period:]).ewm(span=period, adjust=False).mean().tolist()

        assert len(ours) == len(prices) - period + 1
        for a, b in zip(ours, ref):
            assert math.isclose(a, b, rel_tol=1e-9)

    def test_ema_first_value_is_sma(self):
        data = [10.0, 11.0, 12.0, 13.0]
        assert calculate_ema(data, 3)[0] == pytest.approx(11.0)


class TestRSIBounds:
    """
    **Feature: stock-signal, Property 3: RSI Range**

    *For any* series with at least period + 1 prices, RSI lies in [0, 100];
    monotone series pin it to the extremes.
    """

    @given(prices=price_series(min_length=15, max_length=200))
    @settings(max_examples=100, deadline=None)
    def test_rsi_within_bounds(self, prices: list[float]):
        assert 0 <= calculate_rsi(prices, 14) <= 100

    def test_strictly_increasing_is_100(self):
        assert calculate_rsi([float(i) for i in range(1, 40)], 14) == 100.0

    def test_strictly_decreasing_is_0(self):
        assert calculate_rsi([float(i) for i in range(40, 1, -1)], 14) == 0.0

    def test_flat_series_is_neutral(self):
        assert calculate_rsi([100.0] * 30, 14) == 50.0

    def test_too_short_raises(self):
        with pytest.raises(ValueError):
            calculate_rsi([1.0] * 14, 14)


class TestRSISeriesConsistency:
    """
    **Feature: stock-signal, Property 4: Incremental RSI Series**

    *For any* series, element j of the RSI series equals the latest RSI
    computed on the first period + j + 1 prices.
    """

    @given(prices=price_series(min_length=16, max_length=80))
    @settings(max_examples=50, deadline=None)
    def test_series_matches_point_calculation(self, prices: list[float]):
        period = 14
        series = calculate_rsi_series(prices, period)

        assert len(series) == len(prices) - period
        for j, value in enumerate(series):
            expected = calculate_rsi(prices[:period + j + 1], period)
            assert math.isclose(value, expected, rel_tol=1e-9, abs_tol=1e-9)


class TestMACDStructure:
    """
    **Feature: stock-signal, Property 5: MACD Alignment**

    *For any* series, the MACD line has len - slow + 1 values, the signal
    line and histogram have len - slow - signal + 2, and
    histogram = macd - signal at every aligned index.
    """

    @given(prices=price_series(min_length=40, max_length=200))
    @settings(max_examples=50, deadline=None)
    def test_series_lengths_and_histogram(self, prices: list[float]):
        macd_line, signal_line, histogram = calculate_macd_series(prices, 12, 26, 9)

        assert len(macd_line) == len(prices) - 25
        assert len(signal_line) == len(histogram) == len(prices) - 33

        offset = len(macd_line) - len(signal_line)
        for i, hist in enumerate(histogram):
            assert math.isclose(hist, macd_line[offset + i] - signal_line[i], abs_tol=1e-9)

    def test_latest_values_absent_when_short(self):
        assert calculate_macd([1.0] * 20) == (None, None, None)

    def test_signal_absent_when_macd_line_short(self):
        macd, signal, hist = calculate_macd([float(i) for i in range(1, 30)])
        assert macd is not None
        assert signal is None and hist is None


class TestBollingerBands:
    """
    **Feature: stock-signal, Property 6: Bollinger Symmetry**

    *For any* series, the bands are symmetric about the middle band, which
    is the window SMA; the width follows the population std deviation.
    """

    @given(prices=price_series(min_length=20, max_length=100))
    @settings(max_examples=100, deadline=None)
    def test_symmetric_and_matches_pandas(self, prices: list[float]):
        upper, middle, lower = calculate_bollinger_bands(prices, 20, 2.0)
        window = pd.Series(prices[-20:])

        assert math.isclose(upper - middle, middle - lower, rel_tol=1e-9, abs_tol=1e-9)
        assert math.isclose(middle, window.mean(), rel_tol=1e-9)
        assert math.isclose(upper - middle, 2.0 * window.std(ddof=0), rel_tol=1e-6, abs_tol=1e-9)

    def test_constant_prices_collapse_bands(self):
        assert calculate_bollinger_bands([50.0] * 25) == (50.0, 50.0, 50.0)

    def test_short_series_returns_zeros(self):
        assert calculate_bollinger_bands([1.0] * 5, 20) == (0.0, 0.0, 0.0)

    def test_wider_multiplier_widens_bands(self):
        prices = [100.0 + (i % 5) for i in range(40)]
        narrow = calculate_bollinger_bands(prices, 20, 1.0)
        wide = calculate_bollinger_bands(prices, 20, 3.0)
        assert wide[0] > narrow[0]
        assert wide[2] < narrow[2]

    def test_series_length(self):
        upper, middle, lower = calculate_bollinger_series([1.0] * 30, 20)
        assert len(upper) == len(middle) == len(lower) == 11


class TestATR:
    """
    **Feature: stock-signal, Property 7: ATR of Constant Spread**

    *For any* constant close with high/low a fixed distance d away, the
    ATR equals 2d.
    """

    @given(close=st.floats(10.0, 1000.0), spread=st.floats(0.01, 5.0))
    @settings(max_examples=50, deadline=None)
    def test_constant_spread(self, close: float, spread: float):
        closes = [close] * 30
        atr = calculate_atr([close + spread] * 30, [close - spread] * 30, closes, 14)
        assert math.isclose(atr, 2 * spread, rel_tol=1e-9)

    def test_gap_counts_toward_true_range(self):
        ranges = calculate_true_ranges([11.0, 21.0], [9.0, 19.0], [10.0, 20.0])
        assert ranges == [11.0]

    def test_insufficient_data_is_zero(self):
        assert calculate_atr([2.0] * 5, [1.0] * 5, [1.5] * 5, 14) == 0.0

    def test_mismatched_lengths_raise(self):
        with pytest.raises(ValueError):
            calculate_true_ranges([1.0], [1.0, 2.0], [1.0])


class TestTrendStrength:
    """
    **Feature: stock-signal, Property 8: Trend Strength Sign and Scale**

    *For any* strictly increasing series the trend strength is positive,
    and scaling all prices by k > 0 leaves it unchanged.
    """

    @given(prices=price_series(min_length=10, max_length=80), k=st.floats(0.1, 100.0))
    @settings(max_examples=100, deadline=None)
    def test_scale_invariant(self, prices: list[float], k: float):
        base = calculate_trend_strength(prices)
        scaled = calculate_trend_strength([p * k for p in prices])
        assert math.isclose(base, scaled, rel_tol=1e-6, abs_tol=1e-9)

    def test_increasing_is_positive(self):
        assert calculate_trend_strength([float(i) for i in range(1, 51)]) > 0

    def test_decreasing_is_negative(self):
        assert calculate_trend_strength([float(i) for i in range(50, 0, -1)]) < 0

    def test_known_slope(self):
        # slope 1 per step, last price 50
        assert calculate_trend_strength([float(i) for i in range(1, 51)]) == pytest.approx(2.0)

    def test_degenerate_inputs(self):
        assert calculate_trend_strength([5.0]) == 0.0
        assert calculate_trend_strength([5.0, 0.0]) == 0.0
