"""StockSignal - technical-indicator stock analyzer.

Fetches price history and a live quote for a ticker, derives technical
indicators, scores them and emits a STRONG BUY..STRONG SELL recommendation
with target price, stop-loss and confidence.
"""

from stocksignal.analysis.analyzer import StockAnalyzer
from stocksignal.config import AnalysisConfig

__version__ = "0.1.0"

__all__ = ["AnalysisConfig", "StockAnalyzer", "__version__"]
