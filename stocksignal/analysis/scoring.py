"""Scoring engine: weighted bullish/bearish rules over a Metrics snapshot.

Rules are evaluated in a fixed order and accumulate into one point total.
Trend and momentum rules (moving-average cross, MACD, trend strength)
carry the largest weights; mean-reversion rules (RSI, Bollinger) are
weighted lower and RSI extremes are softened when they run against a
strong trend. A late veto dampens scores when two extreme readings
co-occur, and a confirmation check trims strong scores backed by too few
agreeing indicators.
"""

from stocksignal.config import AnalysisConfig
from stocksignal.models import Metrics, Reason, ReasonKind, ScoreResult

# Number of independent indicators that can count as bullish/bearish
CONFIRMATION_TOTAL = 7
CONFIRMATION_MINIMUM = 4
CONFIRMATION_SCORE = 30
CONFIRMATION_ADJUSTMENT = 5

STRONG_TREND = 0.7
RANGING_TREND = 0.3

RSI_EXTREME_OVERSOLD = 25
RSI_EXTREME_OVERBOUGHT = 75
RSI_HEALTHY_RANGE = (45, 65)
RSI_WEAK_FLOOR = 35

MOMENTUM_FALLBACK_PCT = 10
EXTENDED_MOVE_PCT = 30

VETO_BB_OVERBOUGHT = 0.9
VETO_BB_OVERSOLD = 0.1
VETO_MAX_REDUCTION = 15


class _ScoreCard:
    """Mutable accumulator used while rules are evaluated."""

    def __init__(self):
        self.score = 0.0
        self.bullish_count = 0
        self.bearish_count = 0
        self.reasons: list[Reason] = []
        self.warnings: list[Reason] = []
        self.veto: Reason | None = None

    def add(self, points: float, kind: ReasonKind, text: str, counts: bool = False) -> None:
        self.score += points
        if counts and kind is ReasonKind.BULLISH:
            self.bullish_count += 1
        elif counts and kind is ReasonKind.BEARISH:
            self.bearish_count += 1
        self.reasons.append(Reason(kind=kind, text=text))

    def warn(self, points: float, text: str) -> None:
        self.score += points
        self.warnings.append(Reason(kind=ReasonKind.WARNING, text=text))

    def result(self) -> ScoreResult:
        reasons = list(self.reasons) + list(self.warnings)
        if self.veto is not None:
            reasons.insert(0, self.veto)
        return ScoreResult(
            score=self.score,
            reasons=reasons,
            bullish_count=self.bullish_count,
            bearish_count=self.bearish_count,
        )


def _score_cross(card: _ScoreCard, m: Metrics) -> None:
    if m.sma_200 is None:
        return
    if m.sma_50 > m.sma_200:
        card.add(15, ReasonKind.BULLISH, "Golden Cross: 50-day MA above 200-day MA (bullish)", counts=True)
    else:
        card.add(-15, ReasonKind.BEARISH, "Death Cross: 50-day MA below 200-day MA (bearish)", counts=True)


def _score_rsi(card: _ScoreCard, m: Metrics, config: AnalysisConfig) -> None:
    strong_uptrend = m.trend_strength > STRONG_TREND
    strong_downtrend = m.trend_strength < -STRONG_TREND
    rsi = m.rsi

    if rsi < config.rsi_oversold:
        # Oversold in a downtrend can keep falling
        points = 8 if strong_downtrend else 12
        card.add(points, ReasonKind.BULLISH, f"RSI oversold at {rsi:.1f} (potential bounce)", counts=True)
        if rsi < RSI_EXTREME_OVERSOLD:
            card.warn(3, f"EXTREME oversold (RSI: {rsi:.1f}) - high risk/reward")
    elif rsi > config.rsi_overbought:
        # Momentum can carry an overbought stock in a strong uptrend
        penalty = 6 if strong_uptrend else 12
        card.add(
            -penalty,
            ReasonKind.BEARISH,
            f"RSI overbought at {rsi:.1f} (potential pullback)",
            counts=not strong_uptrend,
        )
        if rsi > RSI_EXTREME_OVERBOUGHT:
            if strong_uptrend:
                card.warn(0, f"Overbought but in strong uptrend (RSI: {rsi:.1f})")
            else:
                card.warn(-3, f"EXTREME overbought (RSI: {rsi:.1f})")
    elif RSI_HEALTHY_RANGE[0] <= rsi <= RSI_HEALTHY_RANGE[1]:
        card.add(3, ReasonKind.BULLISH, f"RSI healthy at {rsi:.1f} (neutral to bullish)")
    elif RSI_WEAK_FLOOR <= rsi < RSI_HEALTHY_RANGE[0]:
        card.add(0, ReasonKind.NEUTRAL, f"RSI slightly weak at {rsi:.1f}")
    elif RSI_HEALTHY_RANGE[1] < rsi <= config.rsi_overbought:
        card.add(0, ReasonKind.NEUTRAL, f"RSI slightly strong at {rsi:.1f}")


def _score_macd(card: _ScoreCard, m: Metrics) -> None:
    if not m.has_macd:
        # Fall back to plain price momentum
        change = m.price_change_50d
        if change > MOMENTUM_FALLBACK_PCT:
            card.add(8, ReasonKind.BULLISH, f"Strong 50-day price momentum (+{change:.1f}%)")
        elif change < -MOMENTUM_FALLBACK_PCT:
            card.add(-8, ReasonKind.BEARISH, f"Weak 50-day price momentum ({change:.1f}%)")
        return

    if m.macd > m.macd_signal and m.macd_histogram > 0:
        card.add(20, ReasonKind.BULLISH, "MACD bullish crossover (strong momentum)", counts=True)
    elif m.macd < m.macd_signal and m.macd_histogram < 0:
        card.add(-20, ReasonKind.BEARISH, "MACD bearish crossover (weak momentum)", counts=True)
    elif m.macd > m.macd_signal:
        card.add(8, ReasonKind.BULLISH, "MACD line above signal (building momentum)")
    elif m.macd < m.macd_signal:
        card.add(-8, ReasonKind.BEARISH, "MACD line below signal (losing momentum)")


def _score_ema(card: _ScoreCard, m: Metrics) -> None:
    if m.current_price > m.ema_20:
        card.add(12, ReasonKind.BULLISH, "Price above 20-day EMA (short-term uptrend)", counts=True)
    else:
        card.add(-12, ReasonKind.BEARISH, "Price below 20-day EMA (short-term downtrend)", counts=True)


def _score_bollinger(card: _ScoreCard, m: Metrics) -> None:
    if m.bb_position < 0.2:
        card.add(10, ReasonKind.BULLISH, "Near lower Bollinger Band (oversold)", counts=True)
        if m.bb_position < 0.05:
            card.warn(5, "Touching lower Bollinger Band (extreme oversold)")
    elif m.bb_position > 0.8:
        card.add(-10, ReasonKind.BEARISH, "Near upper Bollinger Band (overbought)", counts=True)
        if m.bb_position > 0.95:
            card.warn(-5, "Touching upper Bollinger Band (extreme overbought)")


def _score_volume(card: _ScoreCard, m: Metrics) -> None:
    ratio = m.volume_ratio
    if ratio > 1.5:
        card.add(10, ReasonKind.BULLISH, f"High volume ({ratio:.1f}x average) - strong interest")
        if ratio > 2.5:
            card.warn(5, f"VERY high volume ({ratio:.1f}x) - major move")
    elif ratio < 0.5:
        card.add(-5, ReasonKind.BEARISH, f"Low volume ({ratio:.1f}x average) - weak conviction")
        if ratio < 0.3:
            card.warn(0, f"EXTREMELY low volume ({ratio:.1f}x) - no interest")


def _score_trend(card: _ScoreCard, m: Metrics) -> None:
    strength = m.trend_strength
    if strength > STRONG_TREND:
        card.add(15, ReasonKind.BULLISH, f"Strong uptrend (strength: {strength:.2f})", counts=True)
    elif strength < -STRONG_TREND:
        card.add(-15, ReasonKind.BEARISH, f"Strong downtrend (strength: {strength:.2f})", counts=True)
    elif abs(strength) < RANGING_TREND:
        card.warn(0, "Weak/ranging market - choppy conditions")


def _score_extended_move(card: _ScoreCard, m: Metrics) -> None:
    if not m.sma_200:
        return
    distance = (m.current_price - m.sma_200) / m.sma_200 * 100
    if distance > EXTENDED_MOVE_PCT:
        card.warn(-5, f"Extended above SMA200 (+{distance:.1f}%) - overheated")
    elif distance < -EXTENDED_MOVE_PCT:
        card.warn(5, f"Extended below SMA200 ({distance:.1f}%) - oversold")


def _score_fundamentals(card: _ScoreCard, m: Metrics) -> None:
    pe, forward_pe = m.pe_ratio, m.forward_pe
    if pe is not None and pe > 0 and forward_pe is not None and forward_pe > 0:
        if forward_pe < 15 and pe < 25:
            card.add(
                10,
                ReasonKind.BULLISH,
                f"Attractive valuation (P/E: {pe:.1f}, Fwd P/E: {forward_pe:.1f})",
            )
        elif pe > 40:
            card.add(-5, ReasonKind.WARNING, f"High valuation (P/E: {pe:.1f})")

    peg = m.peg_ratio
    if peg is not None and 0 < peg < 1:
        card.add(5, ReasonKind.BULLISH, f"Excellent PEG ratio: {peg:.2f}")


def _apply_veto(card: _ScoreCard, m: Metrics) -> None:
    band_pct = m.bb_position * 100

    if m.rsi > RSI_EXTREME_OVERBOUGHT and m.bb_position > VETO_BB_OVERBOUGHT and card.score > 0:
        reduction = min(card.score, VETO_MAX_REDUCTION)
        card.score -= reduction
        card.veto = Reason(
            kind=ReasonKind.VETO,
            text=(
                f"VETO: Extreme overbought (RSI: {m.rsi:.1f}, BB: {band_pct:.0f}%) "
                f"- reduced score by {reduction:g}"
            ),
        )

    if m.rsi < RSI_EXTREME_OVERSOLD and m.bb_position < VETO_BB_OVERSOLD and card.score < 0:
        reduction = min(abs(card.score), VETO_MAX_REDUCTION)
        card.score += reduction
        card.veto = Reason(
            kind=ReasonKind.VETO,
            text=(
                f"VETO: Extreme oversold (RSI: {m.rsi:.1f}, BB: {band_pct:.0f}%) "
                f"- reduced bearish score by {reduction:g}"
            ),
        )


def _apply_confirmation(card: _ScoreCard) -> None:
    if card.score > CONFIRMATION_SCORE and card.bullish_count < CONFIRMATION_MINIMUM:
        card.warn(
            -CONFIRMATION_ADJUSTMENT,
            f"Bullish score lacks confirmation ({card.bullish_count}/{CONFIRMATION_TOTAL} bullish indicators)",
        )
    if card.score < -CONFIRMATION_SCORE and card.bearish_count < CONFIRMATION_MINIMUM:
        card.warn(
            CONFIRMATION_ADJUSTMENT,
            f"Bearish score lacks confirmation ({card.bearish_count}/{CONFIRMATION_TOTAL} bearish indicators)",
        )


def calculate_score(metrics: Metrics, config: AnalysisConfig) -> ScoreResult:
    """Score a metrics snapshot.

    Pure function of its inputs: the same snapshot and config always
    produce the same result.

    Args:
        metrics: Latest indicator values.
        config: Supplies the RSI oversold/overbought bounds.

    Returns:
        ScoreResult with score, ordered reasons and indicator counts.
    """
    card = _ScoreCard()

    _score_cross(card, metrics)
    _score_rsi(card, metrics, config)
    _score_macd(card, metrics)
    _score_ema(card, metrics)
    _score_bollinger(card, metrics)
    _score_volume(card, metrics)
    _score_trend(card, metrics)
    _score_extended_move(card, metrics)
    _score_fundamentals(card, metrics)
    _apply_veto(card, metrics)
    _apply_confirmation(card)

    return card.result()
