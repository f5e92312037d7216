"""Market data sources and ticker discovery."""

from stocksignal.data.base import MarketDataSource
from stocksignal.data.discovery import STRATEGIES, TickerDiscovery
from stocksignal.data.tickers import CRYPTO_TICKERS, POPULAR_TICKERS, TICKER_CATEGORIES
from stocksignal.data.yahoo import YahooDataSource, history_window

__all__ = [
    "CRYPTO_TICKERS",
    "MarketDataSource",
    "POPULAR_TICKERS",
    "STRATEGIES",
    "TICKER_CATEGORIES",
    "TickerDiscovery",
    "YahooDataSource",
    "history_window",
]
