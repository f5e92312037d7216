"""Technical indicator calculations for stock analysis.

Pure functions over plain lists of floats. Series-returning indicators
produce one value per complete window (no NaN padding), so a series built
with period ``p`` starts at index ``p - 1`` of its input. Latest-value
indicators (RSI, MACD, Bollinger Bands, ATR) return only the most recent
reading; their ``*_series`` counterparts produce the full history for
charting.
"""

import math
from typing import Optional


def calculate_sma(data: list[float], period: int) -> list[float]:
    """Calculate Simple Moving Average.

    Args:
        data: List of values (prices or volumes).
        period: Number of elements per window.

    Returns:
        One mean per window of ``period`` consecutive elements, sliding by
        one. Length is ``len(data) - period + 1`` (empty if period > len).
    """
    if period < 1:
        raise ValueError("period must be positive")
    if len(data) < period:
        return []

    return [
        sum(data[i - period + 1:i + 1]) / period
        for i in range(period - 1, len(data))
    ]


def calculate_ema(data: list[float], period: int) -> list[float]:
    """Calculate Exponential Moving Average.

    The first value is the SMA of the first ``period`` elements; each
    subsequent value is ``price * k + prev * (1 - k)`` with
    ``k = 2 / (period + 1)``.

    Args:
        data: List of values.
        period: Number of periods for the EMA.

    Returns:
        List of EMA values, length ``len(data) - period + 1``.
    """
    if period < 1:
        raise ValueError("period must be positive")
    if len(data) < period:
        return []

    k = 2 / (period + 1)
    result = [sum(data[:period]) / period]

    for price in data[period:]:
        result.append(price * k + result[-1] * (1 - k))

    return result


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        # No losses: fully overbought, unless the series is flat
        return 100.0 if avg_gain > 0 else 50.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def _seed_averages(changes: list[float], period: int) -> tuple[float, float]:
    gains = 0.0
    losses = 0.0
    for change in changes[:period]:
        if change > 0:
            gains += change
        else:
            losses -= change
    return gains / period, losses / period


def _smooth(avg: float, current: float, period: int) -> float:
    return (avg * (period - 1) + current) / period


def calculate_rsi(prices: list[float], period: int = 14) -> float:
    """Calculate the latest Relative Strength Index.

    Wilder smoothing: the first ``period`` changes seed the average gain
    and loss, later changes are folded in with
    ``avg = (avg * (period - 1) + current) / period``.

    Args:
        prices: List of prices, oldest first.
        period: RSI period (default 14).

    Returns:
        RSI value in [0, 100].

    Raises:
        ValueError: If fewer than ``period + 1`` prices are given.
    """
    if period < 1:
        raise ValueError("period must be positive")
    if len(prices) < period + 1:
        raise ValueError(f"RSI needs at least {period + 1} prices, got {len(prices)}")

    changes = [prices[i] - prices[i - 1] for i in range(1, len(prices))]
    avg_gain, avg_loss = _seed_averages(changes, period)

    for change in changes[period:]:
        avg_gain = _smooth(avg_gain, change if change > 0 else 0.0, period)
        avg_loss = _smooth(avg_loss, -change if change < 0 else 0.0, period)

    return _rsi_from_averages(avg_gain, avg_loss)


def calculate_rsi_series(prices: list[float], period: int = 14) -> list[float]:
    """Calculate RSI at every cutoff index in a single pass.

    Element ``j`` equals ``calculate_rsi(prices[:period + j + 1], period)``,
    i.e. the series starts at index ``period`` of the input.

    Args:
        prices: List of prices, oldest first.
        period: RSI period (default 14).

    Returns:
        List of RSI values, length ``max(0, len(prices) - period)``.
    """
    if period < 1:
        raise ValueError("period must be positive")
    if len(prices) < period + 1:
        return []

    changes = [prices[i] - prices[i - 1] for i in range(1, len(prices))]
    avg_gain, avg_loss = _seed_averages(changes, period)
    result = [_rsi_from_averages(avg_gain, avg_loss)]

    for change in changes[period:]:
        avg_gain = _smooth(avg_gain, change if change > 0 else 0.0, period)
        avg_loss = _smooth(avg_loss, -change if change < 0 else 0.0, period)
        result.append(_rsi_from_averages(avg_gain, avg_loss))

    return result


def calculate_macd_series(
    prices: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> tuple[list[float], list[float], list[float]]:
    """Calculate full MACD line, signal line and histogram series.

    The MACD line starts at index ``slow - 1`` of the input; the signal
    line and histogram start at ``slow + signal - 2``.

    Args:
        prices: List of prices.
        fast: Fast EMA period (default 12).
        slow: Slow EMA period (default 26).
        signal: Signal line period (default 9).

    Returns:
        Tuple of (macd_line, signal_line, histogram).
    """
    fast_ema = calculate_ema(prices, fast)
    slow_ema = calculate_ema(prices, slow)

    # The slow EMA is shorter; align the fast EMA to its tail
    offset = len(fast_ema) - len(slow_ema)
    macd_line = [fast_ema[offset + i] - slow_ema[i] for i in range(len(slow_ema))]

    signal_line = calculate_ema(macd_line, signal)
    signal_offset = len(macd_line) - len(signal_line)
    histogram = [
        macd_line[signal_offset + i] - signal_line[i]
        for i in range(len(signal_line))
    ]

    return macd_line, signal_line, histogram


def calculate_macd(
    prices: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> tuple[Optional[float], Optional[float], Optional[float]]:
    """Calculate the latest MACD reading.

    Args:
        prices: List of prices.
        fast: Fast EMA period (default 12).
        slow: Slow EMA period (default 26).
        signal: Signal line period (default 9).

    Returns:
        Tuple of (macd, signal, histogram). MACD is None when there are
        fewer than ``slow`` prices; signal and histogram are None when the
        MACD line is shorter than ``signal``.
    """
    macd_line, signal_line, histogram = calculate_macd_series(prices, fast, slow, signal)

    if not macd_line:
        return None, None, None
    if not signal_line:
        return macd_line[-1], None, None
    return macd_line[-1], signal_line[-1], histogram[-1]


def _band(window: list[float], std_dev: float) -> tuple[float, float, float]:
    middle = sum(window) / len(window)
    # Population variance
    variance = sum((p - middle) ** 2 for p in window) / len(window)
    std = math.sqrt(variance)
    return middle + std_dev * std, middle, middle - std_dev * std


def calculate_bollinger_bands(
    prices: list[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> tuple[float, float, float]:
    """Calculate the latest Bollinger Bands.

    Args:
        prices: List of prices.
        period: SMA period (default 20).
        std_dev: Standard deviation multiplier (default 2).

    Returns:
        Tuple of (upper, middle, lower). All zero when fewer than
        ``period`` prices are available.
    """
    if len(prices) < period:
        return 0.0, 0.0, 0.0
    return _band(prices[-period:], std_dev)


def calculate_bollinger_series(
    prices: list[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> tuple[list[float], list[float], list[float]]:
    """Calculate Bollinger Bands at every index from ``period - 1`` on.

    Returns:
        Tuple of (upper, middle, lower) lists of equal length.
    """
    upper, middle, lower = [], [], []

    for i in range(period - 1, len(prices)):
        u, m, l = _band(prices[i - period + 1:i + 1], std_dev)
        upper.append(u)
        middle.append(m)
        lower.append(l)

    return upper, middle, lower


def calculate_true_ranges(
    high: list[float],
    low: list[float],
    close: list[float],
) -> list[float]:
    """Calculate the true range for every day after the first.

    Returns:
        List of length ``len(close) - 1``.
    """
    if not (len(high) == len(low) == len(close)):
        raise ValueError("high, low and close must have equal length")

    return [
        max(
            high[i] - low[i],
            abs(high[i] - close[i - 1]),
            abs(low[i] - close[i - 1]),
        )
        for i in range(1, len(close))
    ]


def calculate_atr(
    high: list[float],
    low: list[float],
    close: list[float],
    period: int = 14,
) -> float:
    """Calculate the latest Average True Range.

    ATR is the latest SMA(period) of the true-range series.

    Args:
        high: List of high prices.
        low: List of low prices.
        close: List of close prices.
        period: ATR period (default 14).

    Returns:
        ATR value, or 0.0 when there are not enough true ranges.
    """
    atr_values = calculate_sma(calculate_true_ranges(high, low, close), period)
    if not atr_values:
        return 0.0
    return atr_values[-1]


def calculate_trend_strength(prices: list[float]) -> float:
    """Calculate trend strength via linear regression.

    The least-squares slope of price against index is normalized by the
    latest price: ``slope / prices[-1] * 100``.

    Args:
        prices: List of prices.

    Returns:
        Signed trend strength; positive for uptrends.
    """
    n = len(prices)
    if n < 2 or prices[-1] == 0:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_y = sum(prices)
    sum_xy = sum(i * p for i, p in enumerate(prices))
    sum_x2 = (n - 1) * n * (2 * n - 1) / 6

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    return slope / prices[-1] * 100
