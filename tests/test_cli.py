"""Tests for the command-line interface."""

import json
import logging

import pytest
from click.testing import CliRunner

from stocksignal.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def obj(analyzer, temp_store, fast_config):
    return {"analyzer": analyzer, "store": temp_store, "config": fast_config}


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to the runner's closed streams."""
    yield
    logging.getLogger().handlers.clear()


class TestHelp:
    def test_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("analyze", "batch", "scan", "discover", "history"):
            assert command in result.output


class TestAnalyzeCommand:
    def test_json_output(self, runner, obj):
        result = runner.invoke(cli, ["analyze", "UP", "--json"], obj=obj)

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["ticker"] == "UP"
        assert "chartData" in payload

    def test_rich_output_with_chart(self, runner, obj):
        result = runner.invoke(cli, ["analyze", "up", "--chart"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "Signal Analysis" in result.output
        assert "Golden Cross" in result.output

    def test_uses_cache(self, runner, obj, fake_source):
        runner.invoke(cli, ["analyze", "UP", "--json"], obj=obj)
        calls = fake_source.history_calls
        runner.invoke(cli, ["analyze", "UP", "--json"], obj=obj)
        assert fake_source.history_calls == calls

        runner.invoke(cli, ["analyze", "UP", "--json", "--no-cache"], obj=obj)
        assert fake_source.history_calls == calls + 1

    def test_invalid_ticker(self, runner, obj, fake_source):
        result = runner.invoke(cli, ["analyze", "AA$L"], obj=obj)

        assert result.exit_code == 1
        assert "invalid characters" in result.output
        assert fake_source.history_calls == 0

    def test_analysis_error_json(self, runner, obj):
        result = runner.invoke(cli, ["analyze", "MISSING", "--json"], obj=obj)

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["code"] == "DATA_SOURCE_ERROR"


class TestBatchCommand:
    def test_reports_each_ticker(self, runner, obj):
        result = runner.invoke(cli, ["batch", "UP", "DOWN", "MISSING"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "2/3" in result.output
        assert "MISSING" in result.output

    def test_too_many_tickers(self, runner, obj, fake_source):
        tickers = [f"T{i}" for i in range(11)]
        result = runner.invoke(cli, ["batch", *tickers], obj=obj)

        assert result.exit_code == 1
        assert fake_source.history_calls == 0

    def test_invalid_ticker_blocks_batch(self, runner, obj, fake_source):
        result = runner.invoke(cli, ["batch", "UP", "..X"], obj=obj)

        assert result.exit_code == 1
        assert "Invalid tickers" in result.output
        assert fake_source.history_calls == 0

    def test_json(self, runner, obj):
        result = runner.invoke(cli, ["batch", "UP", "MISSING", "--json"], obj=obj)

        payload = json.loads(result.stdout)
        assert [p["success"] for p in payload] == [True, False]


class TestScanCommand:
    def test_scan_and_archive(self, runner, obj, temp_store):
        result = runner.invoke(cli, ["scan", "--strategy", "trending", "--archive"], obj=obj)

        assert result.exit_code == 0, result.output
        latest = temp_store.get_latest_signals()
        assert {s.ticker for s in latest} == {"UP", "DOWN"}

        runs = temp_store.get_signal_runs()
        assert len(runs) == 1
        assert runs[0].status == "success"
        assert runs[0].signals_saved == 2

    def test_history_after_archive(self, runner, obj):
        runner.invoke(cli, ["scan", "--archive"], obj=obj)
        result = runner.invoke(cli, ["history", "UP"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "UP Signal History" in result.output

    def test_history_empty(self, runner, obj):
        result = runner.invoke(cli, ["history", "NVDA"], obj=obj)
        assert "No archived signals for NVDA" in result.output

    def test_discover_static(self, runner, obj):
        result = runner.invoke(cli, ["discover", "--strategy", "static", "--limit", "3"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "AAPL" in result.output
        assert "GOOGL" in result.output
