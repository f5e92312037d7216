"""Confidence estimator."""

import math

AGREEMENT_BASE = 50
AGREEMENT_SPAN = 30
STRONG_SCORE_BONUS = 15
SCORE_BONUS = 8
CONFLICT_PENALTY = 3


def calculate_confidence(bullish_count: int, bearish_count: int, score: float) -> int:
    """Convert indicator agreement and score magnitude into a percentage.

    Agreement alone yields 50-80; decisive scores add a bonus and each
    conflicting indicator subtracts a penalty.

    Args:
        bullish_count: Number of bullish indicators.
        bearish_count: Number of bearish indicators.
        score: Final score.

    Returns:
        Confidence in [0, 100].
    """
    total = bullish_count + bearish_count
    if total == 0:
        return AGREEMENT_BASE

    agreement = max(bullish_count, bearish_count) / total
    confidence = AGREEMENT_BASE + agreement * AGREEMENT_SPAN

    strength = abs(score)
    if strength >= 35:
        confidence += STRONG_SCORE_BONUS
    elif strength >= 20:
        confidence += SCORE_BONUS

    confidence -= min(bullish_count, bearish_count) * CONFLICT_PENALTY

    # Round half up
    return max(0, min(100, math.floor(confidence + 0.5)))


def fallback_confidence(score: float) -> float:
    """Confidence used when the estimator itself fails."""
    return min(abs(score), 100.0)
