"""Metrics assembler: latest indicator values for one ticker."""

from stocksignal.config import AnalysisConfig
from stocksignal.errors import AnalysisError
from stocksignal.indicators.technical import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_sma,
    calculate_trend_strength,
)
from stocksignal.models import Metrics, Quote


def _latest(series: list[float], name: str) -> float:
    if not series:
        raise AnalysisError(f"Not enough data to compute {name}")
    return series[-1]


def build_metrics(
    closes: list[float],
    highs: list[float],
    lows: list[float],
    volumes: list[float],
    quote: Quote,
    config: AnalysisConfig,
) -> Metrics:
    """Run every indicator and keep the latest value of each.

    Args:
        closes: Close prices, oldest first.
        highs: High prices, same length as closes.
        lows: Low prices, same length as closes.
        volumes: Volumes, same length as closes.
        quote: Current quote supplying optional fundamentals.
        config: Indicator windows and thresholds.

    Returns:
        Metrics snapshot.

    Raises:
        AnalysisError: If history is shorter than the short moving average.
    """
    n = len(closes)
    if not (len(highs) == len(lows) == len(volumes) == n):
        raise AnalysisError("Price and volume arrays must have equal length")

    short_ma = config.short_moving_average
    if n < short_ma:
        raise AnalysisError(f"Insufficient data: need at least {short_ma} data points, got {n}")

    current_price = closes[-1]

    sma_short = _latest(calculate_sma(closes, short_ma), "short moving average")
    sma_long_series = calculate_sma(closes, config.long_moving_average)
    sma_long = sma_long_series[-1] if sma_long_series else None
    ema_short = _latest(calculate_ema(closes, config.ema_period), "EMA")

    try:
        rsi = calculate_rsi(closes, config.rsi_period)
    except ValueError as exc:
        raise AnalysisError(str(exc)) from exc

    macd, macd_signal, macd_histogram = calculate_macd(
        closes, config.macd_fast, config.macd_slow, config.macd_signal
    )

    upper, _, lower = calculate_bollinger_bands(
        closes, config.bollinger_period, config.bollinger_std_dev
    )
    band_width = upper - lower
    # Flat prices collapse the bands; treat as mid-band
    bb_position = (current_price - lower) / band_width if band_width > 0 else 0.5

    volume_sma = _latest(calculate_sma(volumes, config.volume_period), "volume average")
    volume_ratio = volumes[-1] / volume_sma if volume_sma > 0 else 1.0

    atr = calculate_atr(highs, lows, closes, config.atr_period)
    trend_strength = calculate_trend_strength(closes[-short_ma:])

    base_price = closes[-short_ma]
    price_change = (current_price - base_price) / base_price * 100 if base_price else 0.0

    return Metrics(
        current_price=current_price,
        sma_50=sma_short,
        sma_200=sma_long,
        ema_20=ema_short,
        rsi=rsi,
        macd=macd,
        macd_signal=macd_signal,
        macd_histogram=macd_histogram,
        bb_position=bb_position,
        volume_ratio=volume_ratio,
        atr=atr,
        trend_strength=trend_strength,
        price_change_50d=price_change,
        pe_ratio=quote.trailing_pe,
        forward_pe=quote.forward_pe,
        peg_ratio=quote.trailing_peg_ratio,
        profit_margin=quote.profit_margins * 100 if quote.profit_margins is not None else None,
        debt_to_equity=quote.debt_to_equity,
    )
