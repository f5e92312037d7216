"""Recommendation labels and ATR-based target / stop-loss levels."""

from typing import NamedTuple

from stocksignal.models import Recommendation

STRONG_BUY_THRESHOLD = 35
BUY_THRESHOLD = 20
HOLD_THRESHOLD = -20
SELL_THRESHOLD = -35

# Fallback volatility when ATR is missing or non-positive
ATR_FALLBACK_PCT = 0.02

TARGET_ATR_MULTIPLE = 2.0
STOP_ATR_MULTIPLE = 1.5
HOLD_ATR_MULTIPLE = 1.0


class PriceTargets(NamedTuple):
    target: float
    stop_loss: float


def get_recommendation(score: float) -> Recommendation:
    """Map a score onto the five-level recommendation scale.

    Args:
        score: Point total from the scoring engine.

    Returns:
        One of STRONG BUY, BUY, HOLD, SELL, STRONG SELL.
    """
    if score >= STRONG_BUY_THRESHOLD:
        return "STRONG BUY"
    if score >= BUY_THRESHOLD:
        return "BUY"
    if score >= HOLD_THRESHOLD:
        return "HOLD"
    if score >= SELL_THRESHOLD:
        return "SELL"
    return "STRONG SELL"


def effective_atr(current_price: float, atr: float) -> float:
    """Return ATR, or 2% of price when ATR is zero or negative."""
    return atr if atr > 0 else current_price * ATR_FALLBACK_PCT


def calculate_targets(
    current_price: float,
    atr: float,
    recommendation: Recommendation,
) -> PriceTargets:
    """Derive target price and stop-loss from ATR.

    Buys aim 2 ATR above price with a 1.5 ATR stop below; sells mirror
    that; holds use a symmetric 1 ATR band.

    Args:
        current_price: Latest price.
        atr: Average True Range.
        recommendation: Recommendation label.

    Returns:
        PriceTargets(target, stop_loss).
    """
    vol = effective_atr(current_price, atr)

    if recommendation in ("STRONG BUY", "BUY"):
        return PriceTargets(
            current_price + TARGET_ATR_MULTIPLE * vol,
            current_price - STOP_ATR_MULTIPLE * vol,
        )
    if recommendation in ("STRONG SELL", "SELL"):
        return PriceTargets(
            current_price - TARGET_ATR_MULTIPLE * vol,
            current_price + STOP_ATR_MULTIPLE * vol,
        )
    return PriceTargets(
        current_price + HOLD_ATR_MULTIPLE * vol,
        current_price - HOLD_ATR_MULTIPLE * vol,
    )


def trade_ratios(current_price: float, target: float, stop_loss: float) -> tuple[float, float, float]:
    """Compute potential gain %, risk % and risk/reward ratio.

    Returns:
        Tuple of (potential_gain, risk, risk_reward_ratio).
    """
    potential_gain = (target - current_price) / current_price * 100
    risk = (current_price - stop_loss) / current_price * 100
    risk_reward = (target - current_price) / (current_price - stop_loss)
    return potential_gain, risk, risk_reward
