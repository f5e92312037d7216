"""Technical indicators module."""

from stocksignal.indicators.technical import (
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

__all__ = [
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_bollinger_series",
    "calculate_ema",
    "calculate_macd",
    "calculate_macd_series",
    "calculate_rsi",
    "calculate_rsi_series",
    "calculate_sma",
    "calculate_trend_strength",
    "calculate_true_ranges",
]
