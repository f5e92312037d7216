"""Candle (OHLCV) data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents one trading day's OHLCV bar."""

    date: datetime = Field(..., description="Bar date")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Trading volume")
    adj_close: Optional[float] = Field(default=None, ge=0, description="Adjusted close")

    model_config = {"frozen": True}
