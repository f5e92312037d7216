"""Metrics snapshot model."""

from typing import Optional

from pydantic import BaseModel, Field


class Metrics(BaseModel):
    """Latest-value indicator snapshot for one analysis."""

    current_price: float = Field(..., description="Latest close")
    sma_50: float = Field(..., description="Latest short SMA")
    sma_200: Optional[float] = Field(default=None, description="Latest long SMA, if enough history")
    ema_20: float = Field(..., description="Latest short-term EMA")
    rsi: float = Field(..., ge=0, le=100, description="Latest RSI")
    macd: Optional[float] = Field(default=None, description="Latest MACD line")
    macd_signal: Optional[float] = Field(default=None, description="Latest MACD signal line")
    macd_histogram: Optional[float] = Field(default=None, description="Latest MACD histogram")
    bb_position: float = Field(..., description="Position between lower (0) and upper (1) band")
    volume_ratio: float = Field(..., description="Last volume / volume SMA")
    atr: float = Field(..., ge=0, description="Average True Range")
    trend_strength: float = Field(..., description="Normalized regression slope")
    price_change_50d: float = Field(..., description="Percent change over the short MA window")
    pe_ratio: Optional[float] = Field(default=None, description="Trailing P/E")
    forward_pe: Optional[float] = Field(default=None, description="Forward P/E")
    peg_ratio: Optional[float] = Field(default=None, description="PEG ratio")
    profit_margin: Optional[float] = Field(default=None, description="Profit margin in percent")
    debt_to_equity: Optional[float] = Field(default=None, description="Debt to equity")

    model_config = {"frozen": True}

    @property
    def has_macd(self) -> bool:
        """Whether the MACD signal line and histogram are available."""
        return (
            self.macd is not None
            and self.macd_signal is not None
            and self.macd_histogram is not None
        )
