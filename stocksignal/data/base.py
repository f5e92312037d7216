"""Market data source interface for StockSignal."""

from abc import ABC, abstractmethod
from datetime import datetime

from stocksignal.models import Candle, Quote


class MarketDataSource(ABC):
    """Abstract base class for market data providers.

    Implementations raise DataSourceError when upstream data is missing
    or fails sanity checks.
    """

    @abstractmethod
    def get_historical(self, ticker: str, start: datetime, end: datetime) -> list[Candle]:
        """Get daily OHLCV bars.

        Args:
            ticker: Ticker symbol.
            start: First date to request.
            end: Last date to request.

        Returns:
            Candles in ascending date order.
        """
        pass

    @abstractmethod
    def get_quote(self, ticker: str) -> Quote:
        """Get the current quote with optional fundamentals."""
        pass

    @abstractmethod
    def get_trending(self, limit: int = 50) -> list[str]:
        """Get currently trending ticker symbols."""
        pass

    @abstractmethod
    def get_gainers(self, limit: int = 50) -> list[str]:
        """Get the day's top gaining ticker symbols."""
        pass

    @abstractmethod
    def get_losers(self, limit: int = 50) -> list[str]:
        """Get the day's top losing ticker symbols."""
        pass
