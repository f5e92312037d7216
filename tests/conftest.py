"""Shared fixtures and fakes for StockSignal tests."""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pytest

from stocksignal.analysis.analyzer import StockAnalyzer
from stocksignal.config import AnalysisConfig
from stocksignal.data.base import MarketDataSource
from stocksignal.db.store import SignalStore
from stocksignal.errors import DataSourceError
from stocksignal.models import Candle, Quote


def linear_closes(start: float, end: float, length: int) -> list[float]:
    """Evenly spaced closes from ``start`` to ``end`` inclusive."""
    step = (end - start) / (length - 1)
    return [start + step * i for i in range(length)]


def make_candles(
    closes: list[float],
    spread: float = 1.0,
    volume: float = 1_000_000.0,
    first_day: datetime = datetime(2024, 1, 1),
) -> list[Candle]:
    """Build daily candles with high/low a fixed spread around each close."""
    return [
        Candle(
            date=first_day + timedelta(days=i),
            open=close,
            high=close + spread,
            low=max(0.0, close - spread),
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


def make_quote(symbol: str = "TEST", price: float = 100.0, **fundamentals) -> Quote:
    return Quote(
        symbol=symbol,
        regular_market_price=price,
        regular_market_volume=1_000_000.0,
        **fundamentals,
    )


class FakeSource(MarketDataSource):
    """In-memory market data source.

    ``failures`` makes the first N history fetches raise DataSourceError.
    """

    def __init__(
        self,
        histories: Optional[dict[str, list[Candle]]] = None,
        quotes: Optional[dict[str, Quote]] = None,
        listings: Optional[dict[str, list[str]]] = None,
        failures: int = 0,
    ):
        self.histories = histories or {}
        self.quotes = quotes or {}
        self.listings = listings or {}
        self.failures = failures
        self.history_calls = 0
        self.quote_calls = 0

    def get_historical(self, ticker: str, start: datetime, end: datetime) -> list[Candle]:
        self.history_calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise DataSourceError(f"temporary outage for {ticker}")
        if ticker not in self.histories:
            raise DataSourceError(f"No historical data available for {ticker}")
        return self.histories[ticker]

    def get_quote(self, ticker: str) -> Quote:
        self.quote_calls += 1
        if ticker in self.quotes:
            return self.quotes[ticker]
        closes = self.histories.get(ticker)
        price = closes[-1].close if closes else 100.0
        return make_quote(ticker, price)

    def _listing(self, name: str, limit: int) -> list[str]:
        if name not in self.listings:
            raise DataSourceError(f"{name} listing unavailable")
        return self.listings[name][:limit]

    def get_trending(self, limit: int = 50) -> list[str]:
        return self._listing("trending", limit)

    def get_gainers(self, limit: int = 50) -> list[str]:
        return self._listing("gainers", limit)

    def get_losers(self, limit: int = 50) -> list[str]:
        return self._listing("losers", limit)


@pytest.fixture
def fast_config() -> AnalysisConfig:
    """Default config with retry waits disabled."""
    return AnalysisConfig(retry_delay=0.0, max_retry_delay=0.0)


@pytest.fixture
def uptrend_candles() -> list[Candle]:
    """260 sessions rising linearly from 100 to 200."""
    return make_candles(linear_closes(100.0, 200.0, 260))


@pytest.fixture
def downtrend_candles() -> list[Candle]:
    """260 sessions falling linearly from 200 to 100."""
    return make_candles(linear_closes(200.0, 100.0, 260))


@pytest.fixture
def fake_source(uptrend_candles, downtrend_candles) -> FakeSource:
    return FakeSource(
        histories={"UP": uptrend_candles, "DOWN": downtrend_candles},
        listings={"trending": ["UP", "DOWN"]},
    )


@pytest.fixture
def analyzer(fast_config, fake_source) -> StockAnalyzer:
    return StockAnalyzer(config=fast_config, source=fake_source)


@pytest.fixture
def temp_store():
    """Create a temporary signal store."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield SignalStore(Path(tmpdir) / "test.db")
