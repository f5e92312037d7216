"""Quote data model."""

from typing import Optional

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Current-moment market data for a symbol, independent of history.

    Fundamentals are optional; scoring rules that need them are skipped
    when they are absent.
    """

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    regular_market_price: float = Field(..., ge=0, description="Last traded price")
    regular_market_volume: float = Field(..., ge=0, description="Session volume")
    trailing_pe: Optional[float] = Field(default=None, description="Trailing P/E")
    forward_pe: Optional[float] = Field(default=None, description="Forward P/E")
    trailing_peg_ratio: Optional[float] = Field(default=None, description="Trailing PEG ratio")
    profit_margins: Optional[float] = Field(default=None, description="Profit margin (fraction)")
    debt_to_equity: Optional[float] = Field(default=None, description="Debt to equity")

    model_config = {"frozen": True}
