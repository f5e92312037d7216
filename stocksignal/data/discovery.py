"""Ticker discovery for the market scanner."""

import logging
from itertools import chain, zip_longest
from typing import Literal, Optional

from stocksignal.data.base import MarketDataSource
from stocksignal.data.tickers import POPULAR_TICKERS
from stocksignal.errors import DataSourceError

logger = logging.getLogger(__name__)

Strategy = Literal["trending", "gainers", "losers", "mixed", "static"]
STRATEGIES: tuple[str, ...] = ("trending", "gainers", "losers", "mixed", "static")


class TickerDiscovery:
    """Selects tickers to scan from a market data source.

    Any upstream failure falls back to the static popular-ticker list so
    the scanner always has something to work with.
    """

    def __init__(
        self,
        source: MarketDataSource,
        strategy: Strategy = "trending",
        limit: int = 20,
        static_tickers: Optional[list[str]] = None,
    ):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy '{strategy}'. Choose from: {', '.join(STRATEGIES)}")
        self.source = source
        self.strategy = strategy
        self.limit = limit
        self.static_tickers = static_tickers or POPULAR_TICKERS

    def fetch_tickers(self) -> list[str]:
        """Fetch tickers for the configured strategy.

        Returns:
            Up to ``limit`` unique symbols.
        """
        if self.strategy == "static":
            return self._static()

        try:
            if self.strategy == "trending":
                return self.source.get_trending(self.limit)
            if self.strategy == "gainers":
                return self.source.get_gainers(self.limit)
            if self.strategy == "losers":
                return self.source.get_losers(self.limit)
            return self._mixed()
        except DataSourceError as exc:
            logger.warning("Ticker discovery '%s' failed, using static list: %s", self.strategy, exc)
            return self._static()

    def _static(self) -> list[str]:
        return list(self.static_tickers[: self.limit])

    def _mixed(self) -> list[str]:
        listings = []
        for fetch in (self.source.get_trending, self.source.get_gainers, self.source.get_losers):
            try:
                listings.append(fetch(self.limit))
            except DataSourceError as exc:
                logger.info("Skipping listing in mixed discovery: %s", exc)

        if not listings:
            raise DataSourceError("All ticker listings failed for mixed discovery")

        # Round-robin across listings so each contributes near the top
        interleaved = (t for t in chain.from_iterable(zip_longest(*listings)) if t)
        return list(dict.fromkeys(interleaved))[: self.limit]
