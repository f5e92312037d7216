"""Data models for StockSignal."""

from stocksignal.models.candle import Candle
from stocksignal.models.metrics import Metrics
from stocksignal.models.quote import Quote
from stocksignal.models.record import RunStatus, SavedSignal, SignalRun
from stocksignal.models.signal import (
    ChartData,
    Reason,
    ReasonKind,
    Recommendation,
    ScoreResult,
    Signal,
    SignalSummary,
)

__all__ = [
    "Candle",
    "ChartData",
    "Metrics",
    "Quote",
    "Reason",
    "ReasonKind",
    "Recommendation",
    "RunStatus",
    "SavedSignal",
    "ScoreResult",
    "Signal",
    "SignalRun",
    "SignalSummary",
]
