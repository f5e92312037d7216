"""Scoring and signal output models."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from stocksignal.models.metrics import Metrics

Recommendation = Literal["STRONG BUY", "BUY", "HOLD", "SELL", "STRONG SELL"]


class ReasonKind(str, Enum):
    """Tag attached to every scoring reason."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    WARNING = "warning"
    VETO = "veto"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    ReasonKind.BULLISH: "✓",
    ReasonKind.BEARISH: "✗",
    ReasonKind.NEUTRAL: "○",
    ReasonKind.WARNING: "⚠",
    ReasonKind.VETO: "🛑",
}


class Reason(BaseModel):
    """A single tagged explanation produced by the scoring engine."""

    kind: ReasonKind = Field(..., description="Reason tag")
    text: str = Field(..., min_length=1, description="Human-readable explanation")

    model_config = {"frozen": True}

    def render(self) -> str:
        """Format as a glyph-prefixed display string."""
        return f"{self.kind.glyph} {self.text}"


class ScoreResult(BaseModel):
    """Output of the scoring engine."""

    score: float = Field(..., description="Accumulated point total")
    reasons: list[Reason] = Field(default_factory=list, description="Veto, rule reasons, then warnings")
    bullish_count: int = Field(default=0, ge=0, description="Bullish indicator count")
    bearish_count: int = Field(default=0, ge=0, description="Bearish indicator count")

    model_config = {"frozen": True}


class ChartData(BaseModel):
    """Aligned indicator series for charting; all lists have equal length."""

    dates: list[str]
    prices: list[float]
    volumes: list[float]
    sma_50_values: list[Optional[float]]
    sma_200_values: list[Optional[float]]
    ema_20_values: list[Optional[float]]
    rsi_values: list[Optional[float]]
    macd_values: list[Optional[float]]
    macd_signal_values: list[Optional[float]]
    macd_histogram_values: list[Optional[float]]
    bb_upper: list[Optional[float]]
    bb_middle: list[Optional[float]]
    bb_lower: list[Optional[float]]
    volume_sma: list[Optional[float]]

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.dates)


class SignalSummary(BaseModel):
    """Bullish/bearish indicator tally."""

    bullish: int = Field(..., ge=0)
    bearish: int = Field(..., ge=0)
    total: int = Field(default=7, ge=0)

    model_config = {"frozen": True}


class Signal(BaseModel):
    """Final analysis result for one ticker."""

    ticker: str = Field(..., min_length=1, description="Upper-cased ticker")
    recommendation: Recommendation = Field(..., description="Five-level recommendation")
    confidence: float = Field(..., ge=0, le=100, description="Confidence percentage")
    price: float = Field(..., description="Current price")
    target_price: float = Field(..., description="Target price")
    stop_loss: float = Field(..., description="Stop-loss price")
    potential_gain: float = Field(..., description="(target - price) / price * 100")
    risk: float = Field(..., description="(price - stop) / price * 100")
    risk_reward_ratio: float = Field(..., description="(target - price) / (price - stop)")
    reasons: list[str] = Field(default_factory=list, description="Glyph-prefixed reasons")
    reason_details: list[Reason] = Field(default_factory=list, description="Tagged reasons")
    metrics: Metrics
    chart_data: ChartData = Field(..., alias="chartData")
    timestamp: str = Field(..., description="ISO-8601 analysis time")
    signal_summary: SignalSummary

    model_config = {"frozen": True, "populate_by_name": True}

    def to_json_dict(self) -> dict:
        """Serialize using the external field names (``chartData``)."""
        return self.model_dump(mode="json", by_alias=True)
