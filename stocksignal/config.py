"""Analysis configuration for StockSignal.

Every indicator window, threshold and retry parameter used by the analyzer
lives in one frozen model. Each analyzer owns its own copy; changing
behaviour between calls means swapping in an overridden copy.
"""

from pathlib import Path
from typing import Any, Optional

import toml
from pydantic import BaseModel, Field, model_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "stocksignal" / "config.toml"
DEFAULT_DB_PATH = Path.home() / ".config" / "stocksignal" / "stocksignal.db"


class AnalysisConfig(BaseModel):
    """Numeric parameters controlling every indicator and threshold."""

    # Moving averages
    short_moving_average: int = Field(default=50, gt=0, description="Short SMA window")
    long_moving_average: int = Field(default=200, gt=0, description="Long SMA window")
    ema_period: int = Field(default=20, gt=0, description="Short-term EMA window")

    # RSI
    rsi_period: int = Field(default=14, gt=0, description="RSI lookback")
    rsi_oversold: float = Field(default=30.0, ge=0, le=100, description="Oversold bound")
    rsi_overbought: float = Field(default=70.0, ge=0, le=100, description="Overbought bound")

    # MACD
    macd_fast: int = Field(default=12, gt=0, description="MACD fast EMA period")
    macd_slow: int = Field(default=26, gt=0, description="MACD slow EMA period")
    macd_signal: int = Field(default=9, gt=0, description="MACD signal EMA period")

    # Volatility / volume
    bollinger_period: int = Field(default=20, gt=0, description="Bollinger SMA window")
    bollinger_std_dev: float = Field(default=2.0, gt=0, description="Band width in std devs")
    atr_period: int = Field(default=14, gt=0, description="ATR smoothing window")
    volume_period: int = Field(default=20, gt=0, description="Volume SMA window")

    # Chart
    chart_window: int = Field(default=250, gt=0, description="Most-recent points to chart")

    # Retry / cache
    max_retry_attempts: int = Field(default=3, ge=1, description="Attempts per upstream call")
    retry_delay: float = Field(default=1.0, ge=0, description="Base retry delay in seconds")
    max_retry_delay: float = Field(default=5.0, ge=0, description="Retry delay cap in seconds")
    retry_jitter: float = Field(default=0.1, ge=0, lt=1, description="Fractional delay jitter")
    cache_ttl: int = Field(default=300, ge=0, description="Signal cache TTL in seconds")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_windows(self) -> "AnalysisConfig":
        if self.short_moving_average > self.long_moving_average:
            raise ValueError("short_moving_average cannot exceed long_moving_average")
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be shorter than macd_slow")
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be below rsi_overbought")
        return self

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a validated copy with some fields replaced.

        Args:
            **overrides: Field names and their new values.

        Returns:
            New AnalysisConfig instance.
        """
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        return type(self).model_validate({**self.model_dump(), **overrides})


def load_config(path: Optional[Path] = None) -> AnalysisConfig:
    """Load analysis configuration from a TOML file.

    Values are read from the ``[analysis]`` table; anything missing keeps
    its default.

    Args:
        path: Config file location (defaults to ~/.config/stocksignal/config.toml).

    Returns:
        AnalysisConfig instance.
    """
    config_path = path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AnalysisConfig()

    data = toml.load(config_path)
    return AnalysisConfig.model_validate(data.get("analysis", {}))
