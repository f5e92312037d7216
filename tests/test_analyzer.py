"""Tests for the end-to-end stock analyzer."""

from unittest.mock import patch

import pytest

from conftest import FakeSource, linear_closes, make_candles
from stocksignal.analysis.analyzer import BatchResult, StockAnalyzer, rank_signals
from stocksignal.errors import AnalysisError, ChartError, DataSourceError, ValidationError
from stocksignal.models import ReasonKind, ScoreResult


class TestAnalyzeUptrend:
    """260 sessions rising linearly from 100 to 200."""

    def test_signal_fields(self, analyzer):
        signal = analyzer.analyze("up")

        assert signal.ticker == "UP"
        assert signal.price == 200.0
        assert signal.metrics.rsi > 70
        assert signal.metrics.sma_50 > signal.metrics.sma_200
        assert "✓ Golden Cross: 50-day MA above 200-day MA (bullish)" in signal.reasons
        assert [r.render() for r in signal.reason_details] == signal.reasons

    def test_recommendation_and_levels(self, analyzer):
        signal = analyzer.analyze("UP")

        # Overbought RSI and upper-band pressure offset the trend rules
        assert signal.recommendation == "HOLD"
        assert signal.metrics.atr == pytest.approx(2.0)
        assert signal.target_price == 202.0
        assert signal.stop_loss == 198.0
        assert signal.potential_gain == 1.0
        assert signal.risk == 1.0
        assert signal.risk_reward_ratio == 1.0

    def test_chart_window(self, analyzer):
        signal = analyzer.analyze("UP")
        chart = signal.chart_data

        assert len(chart) == 61
        assert chart.prices[-1] == pytest.approx(200.0)
        assert None not in chart.sma_200_values
        assert chart.dates[-1].startswith("2024-09-16")

    def test_summary_matches_counts(self, analyzer):
        signal = analyzer.analyze("UP")
        bullish = sum(1 for r in signal.reason_details if r.kind is ReasonKind.BULLISH)

        assert signal.signal_summary.total == 7
        assert signal.signal_summary.bullish <= bullish
        assert 0 <= signal.confidence <= 100

    def test_json_uses_chart_alias(self, analyzer):
        payload = analyzer.analyze("UP").to_json_dict()
        assert "chartData" in payload
        assert "chart_data" not in payload


class TestAnalyzeDowntrend:
    def test_death_cross(self, analyzer):
        signal = analyzer.analyze("DOWN")

        assert "✗ Death Cross: 50-day MA below 200-day MA (bearish)" in signal.reasons
        assert signal.metrics.rsi < 30

    def test_sell_side_levels(self, analyzer):
        scored = ScoreResult(score=-25.0, reasons=[], bullish_count=0, bearish_count=3)
        with patch("stocksignal.analysis.analyzer.calculate_score", return_value=scored):
            signal = analyzer.analyze("DOWN")

        assert signal.recommendation == "SELL"
        assert signal.price == 100.0
        assert signal.target_price < signal.price < signal.stop_loss
        # 2 ATR below for the target, 1.5 ATR above for the stop
        assert signal.target_price == pytest.approx(96.0)
        assert signal.stop_loss == pytest.approx(103.0)
        assert signal.potential_gain == pytest.approx(-4.0)


class TestAnalyzeErrors:
    def test_invalid_ticker_rejected_before_fetch(self, analyzer, fake_source):
        with pytest.raises(ValidationError) as info:
            analyzer.analyze("BAD!")

        assert "Ticker contains invalid characters" in info.value.details
        assert fake_source.history_calls == 0

    def test_insufficient_history(self, fast_config):
        source = FakeSource(histories={"TINY": make_candles([100.0] * 10)})
        with pytest.raises(AnalysisError, match="need at least 50") as info:
            StockAnalyzer(fast_config, source).analyze("TINY")

        assert str(info.value).startswith("Analysis failed for TINY")
        assert source.quote_calls == 0

    def test_history_too_short_for_chart(self, fast_config):
        source = FakeSource(histories={"MID": make_candles(linear_closes(100, 120, 150))})
        with pytest.raises(ChartError) as info:
            StockAnalyzer(fast_config, source).analyze("MID")

        assert info.value.code == "CHART_ERROR"

    def test_upstream_failure_after_retries(self, fast_config):
        source = FakeSource(failures=10)
        with pytest.raises(DataSourceError, match="Failed to fetch historical data after retries"):
            StockAnalyzer(fast_config, source).analyze("AAPL")

        assert source.history_calls == fast_config.max_retry_attempts

    def test_transient_failures_recovered(self, fast_config, uptrend_candles):
        source = FakeSource(histories={"UP": uptrend_candles}, failures=2)
        signal = StockAnalyzer(fast_config, source).analyze("UP")

        assert signal.ticker == "UP"
        assert source.history_calls == 3

    def test_unexpected_error_wrapped(self, analyzer):
        with patch("stocksignal.analysis.analyzer.calculate_score", side_effect=ZeroDivisionError("boom")):
            with pytest.raises(AnalysisError, match="Analysis failed for UP: boom"):
                analyzer.analyze("UP")

    def test_confidence_failure_uses_fallback(self, analyzer):
        scored = ScoreResult(score=-42.0, reasons=[], bullish_count=1, bearish_count=2)
        with patch("stocksignal.analysis.analyzer.calculate_score", return_value=scored), \
                patch("stocksignal.analysis.analyzer.calculate_confidence", side_effect=RuntimeError("bad")):
            signal = analyzer.analyze("UP")

        assert signal.recommendation == "STRONG SELL"
        assert signal.confidence == 42.0


class TestConfiguration:
    def test_update_config_replaces_copy(self, analyzer):
        before = analyzer.config
        after = analyzer.update_config(rsi_period=10)

        assert after.rsi_period == 10
        assert before.rsi_period == 14
        assert analyzer.config is after

    def test_update_config_rejects_unknown_field(self, analyzer):
        with pytest.raises(ValueError):
            analyzer.update_config(not_a_field=1)


class TestBatch:
    """
    **Feature: stock-signal, Property 17: Batch Settlement**

    *For any* batch, results come back in input order and one failing
    ticker does not affect the others.
    """

    def test_mixed_outcomes_in_order(self, analyzer):
        results = analyzer.analyze_batch(["UP", "bad!", "MISSING", "DOWN"])

        assert [r.ticker for r in results] == ["UP", "BAD!", "MISSING", "DOWN"]
        assert results[0].ok and results[3].ok
        assert not results[1].ok and "Invalid ticker" in results[1].error
        assert not results[2].ok and "MISSING" in results[2].error

    def test_empty_batch(self, analyzer):
        assert analyzer.analyze_batch([]) == []

    def test_scan_sorted_by_potential_gain(self, analyzer):
        signals = analyzer.scan(["DOWN", "UP", "MISSING"])

        assert {s.ticker for s in signals} == {"UP", "DOWN"}
        gains = [s.potential_gain for s in signals]
        assert gains == sorted(gains, reverse=True)

    def test_rank_signals_drops_failures(self, analyzer):
        signal = analyzer.analyze("UP")
        results = [
            BatchResult(ticker="A", signal=signal.model_copy(update={"ticker": "A", "potential_gain": 1.0})),
            BatchResult(ticker="BAD", error="boom"),
            BatchResult(ticker="B", signal=signal.model_copy(update={"ticker": "B", "potential_gain": 5.0})),
        ]

        assert [s.ticker for s in rank_signals(results)] == ["B", "A"]
