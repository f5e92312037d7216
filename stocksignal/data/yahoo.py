"""Yahoo Finance market data source.

Price history and quotes come from yfinance; trending tickers and the
day's gainers/losers come from Yahoo's public JSON endpoints.
"""

import logging
import math
import re
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

import requests
import yfinance as yf

from stocksignal.config import AnalysisConfig
from stocksignal.data.base import MarketDataSource
from stocksignal.errors import DataSourceError
from stocksignal.models import Candle, Quote

logger = logging.getLogger(__name__)

BASE_URL = "https://query1.finance.yahoo.com"
TRENDING_URL = f"{BASE_URL}/v1/finance/trending/US"
SCREENER_URL = f"{BASE_URL}/v1/finance/screener/predefined/saved"

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
}

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-]+$")


def history_window(config: AnalysisConfig, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Calendar window to request so enough trading days come back.

    Weekends and holidays are excluded upstream, so the long moving
    average plus headroom is stretched by 1.5x in calendar days.

    Returns:
        Tuple of (start, end).
    """
    end = now or datetime.now()
    days = math.ceil((config.long_moving_average + 50) * 1.5)
    return end - timedelta(days=days), end


def normalize_limit(limit: Any) -> int:
    """Clamp a requested result count to [1, MAX_LIMIT], defaulting invalid values."""
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        return DEFAULT_LIMIT
    if math.isnan(limit) or limit <= 0:
        return DEFAULT_LIMIT
    return min(int(limit), MAX_LIMIT)


def sanitize_symbol(symbol: Any) -> Optional[str]:
    """Normalize a symbol from a listing, or None if it is not a plain ticker.

    Indices (``^``), currency/futures pairs (``=``) and exchange-qualified
    symbols (``:``) are rejected.
    """
    if not isinstance(symbol, str):
        return None
    cleaned = symbol.strip().upper()
    if not cleaned:
        return None
    if any(ch in cleaned for ch in "^=:"):
        return None
    if not _SYMBOL_PATTERN.match(cleaned):
        return None
    return cleaned


def sanitize_symbols(symbols: Iterable[Any], context: str, limit: int) -> list[str]:
    """Sanitize, de-duplicate (keeping order) and limit a symbol listing.

    Raises:
        DataSourceError: If no valid symbols remain.
    """
    cleaned = [s for s in (sanitize_symbol(raw) for raw in symbols) if s]
    unique = list(dict.fromkeys(cleaned))

    if not unique:
        raise DataSourceError(f"No valid tickers returned for {context}")

    return unique[:limit]


def _is_finite(value: Any) -> bool:
    if isinstance(value, bool) or value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if _is_finite(value) else None


def _first_finite(info: dict, *keys: str) -> Any:
    # yfinance may return a key with a None value
    return next((info.get(k) for k in keys if _is_finite(info.get(k))), None)


def validate_history(ticker: str, rows: list[dict]) -> list[Candle]:
    """Turn raw OHLCV rows into validated candles.

    Rows with a non-finite close or volume, or without a usable date, are
    dropped. Missing open/high/low fall back to the close. The result is
    sorted oldest first.

    Args:
        ticker: Symbol, for error messages.
        rows: Dicts with date, open, high, low, close, volume, adj_close.

    Returns:
        List of candles in ascending date order.

    Raises:
        DataSourceError: If nothing usable remains.
    """
    if not rows:
        raise DataSourceError(f"No historical data available for {ticker}")

    candles = []
    for row in rows:
        close = row.get("close")
        volume = row.get("volume")
        bar_date = row.get("date")

        if not (_is_finite(close) and _is_finite(volume) and isinstance(bar_date, datetime)):
            continue

        close = float(close)
        candles.append(
            Candle(
                date=bar_date,
                open=float(row["open"]) if _is_finite(row.get("open")) else close,
                high=float(row["high"]) if _is_finite(row.get("high")) else close,
                low=float(row["low"]) if _is_finite(row.get("low")) else close,
                close=close,
                volume=float(volume),
                adj_close=float(row["adj_close"]) if _is_finite(row.get("adj_close")) else close,
            )
        )

    if not candles:
        raise DataSourceError(f"Historical data for {ticker} is missing price or volume information")

    candles.sort(key=lambda c: c.date)
    return candles


def validate_quote(ticker: str, info: Optional[dict]) -> Quote:
    """Build a Quote from a yfinance ``info`` mapping.

    Raises:
        DataSourceError: If the mapping is missing or lacks a finite price/volume.
    """
    if not info or not isinstance(info, dict):
        raise DataSourceError(f"Quote data for {ticker} is unavailable")

    price = _first_finite(info, "regularMarketPrice", "currentPrice")
    volume = _first_finite(info, "regularMarketVolume", "volume")

    if not _is_finite(price):
        raise DataSourceError(f"Quote missing price data for {ticker}")
    if not _is_finite(volume):
        raise DataSourceError(f"Quote missing volume data for {ticker}")

    return Quote(
        symbol=ticker,
        regular_market_price=float(price),
        regular_market_volume=float(volume),
        trailing_pe=_optional_float(info.get("trailingPE")),
        forward_pe=_optional_float(info.get("forwardPE")),
        trailing_peg_ratio=_optional_float(info.get("trailingPegRatio")),
        profit_margins=_optional_float(info.get("profitMargins")),
        debt_to_equity=_optional_float(info.get("debtToEquity")),
    )


def _frame_to_rows(frame) -> list[dict]:
    if frame is None or frame.empty:
        return []

    rows = []
    for timestamp, bar in frame.iterrows():
        rows.append(
            {
                "date": timestamp.to_pydatetime(),
                "open": bar.get("Open"),
                "high": bar.get("High"),
                "low": bar.get("Low"),
                "close": bar.get("Close"),
                "volume": bar.get("Volume"),
                "adj_close": bar.get("Adj Close"),
            }
        )
    return rows


class YahooDataSource(MarketDataSource):
    """Market data from Yahoo Finance."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        """Initialize the data source.

        Args:
            session: Optional requests session for the listing endpoints.
            timeout: HTTP timeout in seconds.
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_historical(self, ticker: str, start: datetime, end: datetime) -> list[Candle]:
        logger.debug("Fetching history for %s from %s to %s", ticker, start.date(), end.date())
        try:
            frame = yf.Ticker(ticker).history(
                start=start,
                end=end,
                interval="1d",
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise DataSourceError(f"Failed to fetch historical data for {ticker}") from exc

        return validate_history(ticker, _frame_to_rows(frame))

    def get_quote(self, ticker: str) -> Quote:
        logger.debug("Fetching quote for %s", ticker)
        try:
            info = yf.Ticker(ticker).info
        except Exception as exc:
            raise DataSourceError(f"Failed to fetch quote for {ticker}") from exc

        return validate_quote(ticker, info)

    def _fetch_listing(self, url: str, params: dict, context: str) -> list[str]:
        try:
            response = self.session.get(
                url, params=params, headers=REQUEST_HEADERS, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise DataSourceError(f"Failed to fetch {context} tickers") from exc

        try:
            quotes = payload["finance"]["result"][0]["quotes"]
        except (KeyError, IndexError, TypeError) as exc:
            raise DataSourceError(f"{context.capitalize()} response missing quotes array") from exc

        return [quote.get("symbol") for quote in quotes if isinstance(quote, dict)]

    def get_trending(self, limit: int = DEFAULT_LIMIT) -> list[str]:
        target = normalize_limit(limit)
        symbols = self._fetch_listing(TRENDING_URL, {"count": target}, "trending")
        return sanitize_symbols(symbols, "trending", target)

    def get_gainers(self, limit: int = DEFAULT_LIMIT) -> list[str]:
        target = normalize_limit(limit)
        symbols = self._fetch_listing(
            SCREENER_URL, {"scrIds": "day_gainers", "count": target}, "gainers"
        )
        return sanitize_symbols(symbols, "gainers", target)

    def get_losers(self, limit: int = DEFAULT_LIMIT) -> list[str]:
        target = normalize_limit(limit)
        symbols = self._fetch_listing(
            SCREENER_URL, {"scrIds": "day_losers", "count": target}, "losers"
        )
        return sanitize_symbols(symbols, "losers", target)
