"""Analysis engine: metrics, scoring, targets, confidence and charts."""

from stocksignal.analysis.analyzer import BatchResult, StockAnalyzer, rank_signals
from stocksignal.analysis.chart import build_chart_data
from stocksignal.analysis.confidence import calculate_confidence
from stocksignal.analysis.metrics import build_metrics
from stocksignal.analysis.scoring import calculate_score
from stocksignal.analysis.targets import calculate_targets, get_recommendation

__all__ = [
    "BatchResult",
    "StockAnalyzer",
    "build_chart_data",
    "build_metrics",
    "calculate_confidence",
    "calculate_score",
    "calculate_targets",
    "get_recommendation",
    "rank_signals",
]
