"""Shared helpers: retry with backoff and ticker validation."""

from stocksignal.utils.retry import RetryPolicy, retry
from stocksignal.utils.validation import (
    TickerValidation,
    is_valid_ticker,
    require_valid_ticker,
    validate_ticker,
)

__all__ = [
    "RetryPolicy",
    "TickerValidation",
    "is_valid_ticker",
    "require_valid_ticker",
    "retry",
    "validate_ticker",
]
