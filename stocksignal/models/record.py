"""Archived signal and archive-run records."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

RunStatus = Literal["success", "partial", "failed"]


class SavedSignal(BaseModel):
    """A signal row as stored in the archive."""

    id: int = Field(..., description="Row identifier")
    ticker: str = Field(..., description="Ticker symbol")
    recommendation: str = Field(..., description="Recommendation at archive time")
    confidence: float = Field(..., description="Confidence percentage")
    price: float = Field(..., description="Price at analysis time")
    target_price: float = Field(..., description="Target price")
    stop_loss: float = Field(..., description="Stop loss")
    potential_gain: float = Field(..., description="Potential gain percentage")
    risk: float = Field(..., description="Risk percentage")
    risk_reward_ratio: float = Field(..., description="Gain to risk ratio")
    bullish_count: Optional[int] = Field(default=None, description="Bullish indicators")
    bearish_count: Optional[int] = Field(default=None, description="Bearish indicators")
    reasons: list[str] = Field(default_factory=list, description="Rendered reasons")
    timestamp: str = Field(..., description="Analysis timestamp")
    archived_at: str = Field(..., description="Archive snapshot timestamp")

    model_config = {"frozen": True}


class SignalRun(BaseModel):
    """Bookkeeping for one archive run."""

    id: int = Field(..., description="Row identifier")
    tickers_analyzed: int = Field(..., ge=0, description="Tickers attempted")
    signals_saved: int = Field(..., ge=0, description="Signals written")
    duration_ms: Optional[int] = Field(default=None, description="Run duration in milliseconds")
    status: RunStatus = Field(..., description="Run outcome")
    error_message: Optional[str] = Field(default=None, description="Failure summary")
    run_timestamp: str = Field(..., description="When the run was recorded")

    model_config = {"frozen": True}
