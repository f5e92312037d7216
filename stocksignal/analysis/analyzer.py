"""Stock analyzer: fetch, compute metrics, score and build the final signal."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel

from stocksignal.analysis.chart import build_chart_data
from stocksignal.analysis.confidence import calculate_confidence, fallback_confidence
from stocksignal.analysis.metrics import build_metrics
from stocksignal.analysis.scoring import CONFIRMATION_TOTAL, calculate_score
from stocksignal.analysis.targets import calculate_targets, get_recommendation, trade_ratios
from stocksignal.config import AnalysisConfig
from stocksignal.data.base import MarketDataSource
from stocksignal.data.yahoo import history_window
from stocksignal.errors import AnalysisError, DataSourceError, StockSignalError
from stocksignal.models import Candle, Quote, Signal, SignalSummary
from stocksignal.utils.retry import RetryPolicy, retry
from stocksignal.utils.validation import require_valid_ticker

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class BatchResult(BaseModel):
    """Settled outcome of one ticker in a batch run."""

    ticker: str
    signal: Optional[Signal] = None
    error: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.signal is not None


class StockAnalyzer:
    """Technical analysis engine.

    Each analyzer owns an immutable AnalysisConfig. Analyses are pure
    given their inputs, so one analyzer may serve concurrent calls.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        source: Optional[MarketDataSource] = None,
    ):
        """Initialize the analyzer.

        Args:
            config: Analysis parameters (defaults to AnalysisConfig()).
            source: Market data source (defaults to YahooDataSource).
        """
        if source is None:
            from stocksignal.data.yahoo import YahooDataSource

            source = YahooDataSource()
        self._config = config or AnalysisConfig()
        self.source = source

    @property
    def config(self) -> AnalysisConfig:
        """Current analysis configuration."""
        return self._config

    def update_config(self, **overrides: Any) -> AnalysisConfig:
        """Replace the configuration with an overridden copy.

        Args:
            **overrides: AnalysisConfig fields to change.

        Returns:
            The new configuration.
        """
        self._config = self._config.with_overrides(**overrides)
        return self._config

    def analyze(self, ticker: str) -> Signal:
        """Analyze a ticker and produce a trading signal.

        Args:
            ticker: Ticker symbol; validated and upper-cased.

        Returns:
            Complete Signal including metrics and chart data.

        Raises:
            ValidationError: If the ticker is malformed.
            DataSourceError: If upstream data could not be fetched.
            AnalysisError: If history is too short or computation fails.
            ChartError: If history is too short for the chart window.
        """
        symbol = require_valid_ticker(ticker)
        config = self._config

        try:
            return self._analyze(symbol, config)
        except StockSignalError as exc:
            raise type(exc)(
                f"Analysis failed for {symbol}: {exc.message}",
                code=exc.code,
                details=exc.details,
            ) from exc
        except Exception as exc:
            raise AnalysisError(f"Analysis failed for {symbol}: {exc}") from exc

    def _fetch_history(self, symbol: str, config: AnalysisConfig) -> list[Candle]:
        start, end = history_window(config)
        try:
            return retry(
                lambda: self.source.get_historical(symbol, start, end),
                RetryPolicy.from_config(config),
                description=f"historical fetch for {symbol}",
            )
        except Exception as exc:
            raise DataSourceError(f"Failed to fetch historical data after retries: {exc}") from exc

    def _fetch_quote(self, symbol: str, config: AnalysisConfig) -> Quote:
        try:
            return retry(
                lambda: self.source.get_quote(symbol),
                RetryPolicy.from_config(config),
                description=f"quote fetch for {symbol}",
            )
        except Exception as exc:
            raise DataSourceError(f"Failed to fetch quote data after retries: {exc}") from exc

    def _analyze(self, symbol: str, config: AnalysisConfig) -> Signal:
        history = self._fetch_history(symbol, config)

        if len(history) < config.short_moving_average:
            raise AnalysisError(
                f"Insufficient data for {symbol}: need at least "
                f"{config.short_moving_average} data points, got {len(history)}"
            )

        quote = self._fetch_quote(symbol, config)

        closes = [c.close for c in history]
        highs = [c.high for c in history]
        lows = [c.low for c in history]
        volumes = [c.volume for c in history]
        dates = [c.date.isoformat() for c in history]

        metrics = build_metrics(closes, highs, lows, volumes, quote, config)
        chart_data = build_chart_data(closes, volumes, dates, config)
        scored = calculate_score(metrics, config)
        recommendation = get_recommendation(scored.score)

        try:
            confidence = float(
                calculate_confidence(scored.bullish_count, scored.bearish_count, scored.score)
            )
        except Exception:
            logger.exception("Confidence calculation failed for %s; using score fallback", symbol)
            confidence = fallback_confidence(scored.score)
        if math.isnan(confidence):
            confidence = 50.0

        current_price = closes[-1]
        target, stop_loss = calculate_targets(current_price, metrics.atr, recommendation)
        potential_gain, risk, risk_reward = trade_ratios(current_price, target, stop_loss)

        logger.info(
            "%s: %s (score %.1f, confidence %.1f, %d bullish / %d bearish)",
            symbol,
            recommendation,
            scored.score,
            confidence,
            scored.bullish_count,
            scored.bearish_count,
        )

        return Signal(
            ticker=symbol,
            recommendation=recommendation,
            confidence=round(confidence, 1),
            price=round(current_price, 2),
            target_price=round(target, 2),
            stop_loss=round(stop_loss, 2),
            potential_gain=round(potential_gain, 2),
            risk=round(risk, 2),
            risk_reward_ratio=round(risk_reward, 2),
            reasons=[reason.render() for reason in scored.reasons],
            reason_details=scored.reasons,
            metrics=metrics,
            chart_data=chart_data,
            timestamp=datetime.now(timezone.utc).isoformat(),
            signal_summary=SignalSummary(
                bullish=scored.bullish_count,
                bearish=scored.bearish_count,
                total=CONFIRMATION_TOTAL,
            ),
        )

    def _settle(self, ticker: str) -> BatchResult:
        try:
            return BatchResult(ticker=ticker.strip().upper(), signal=self.analyze(ticker))
        except StockSignalError as exc:
            logger.error("Batch analysis failed for %s: %s", ticker, exc)
            return BatchResult(ticker=str(ticker).strip().upper(), error=str(exc))

    def analyze_batch(
        self,
        tickers: list[str],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> list[BatchResult]:
        """Analyze many tickers concurrently, tolerating individual failures.

        Args:
            tickers: Ticker symbols.
            max_workers: Thread pool size.

        Returns:
            One BatchResult per input ticker, in input order.
        """
        if not tickers:
            return []

        workers = max(1, min(max_workers, len(tickers)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._settle, tickers))

    def scan(
        self,
        tickers: list[str],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> list[Signal]:
        """Analyze tickers and keep successful signals, best potential gain first.

        Returns:
            Signals sorted by potential gain, descending.
        """
        return rank_signals(self.analyze_batch(tickers, max_workers=max_workers))


def rank_signals(results: list[BatchResult]) -> list[Signal]:
    """Successful signals from a batch, sorted by potential gain descending."""
    signals = [r.signal for r in results if r.ok]
    signals.sort(key=lambda s: s.potential_gain, reverse=True)
    return signals
