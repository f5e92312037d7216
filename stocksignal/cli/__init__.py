"""Command-line interface for StockSignal."""

from stocksignal.cli.main import cli, main

__all__ = ["cli", "main"]
