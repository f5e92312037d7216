"""Chart series builder: full-history indicator series aligned to a window."""

from typing import Optional

from stocksignal.config import AnalysisConfig
from stocksignal.errors import ChartError
from stocksignal.indicators.technical import (
    calculate_bollinger_series,
    calculate_ema,
    calculate_macd_series,
    calculate_rsi_series,
    calculate_sma,
)
from stocksignal.models import ChartData


def chart_start_index(total: int, config: AnalysisConfig) -> int:
    """First history index shown on the chart.

    The window covers the most recent ``chart_window`` points but never
    starts before the long moving average has its first value.
    """
    return max(config.long_moving_average - 1, total - config.chart_window)


def align_series(
    series: list[float],
    natural_start: int,
    chart_start: int,
    length: int,
) -> list[Optional[float]]:
    """Align an indicator series to the chart window.

    Args:
        series: Indicator values; ``series[0]`` belongs to history index
            ``natural_start``.
        natural_start: History index of the first indicator value.
        chart_start: History index of the first charted point.
        length: Number of charted points.

    Returns:
        List of exactly ``length`` values, left-padded with None where the
        indicator starts after the window does.
    """
    if natural_start < chart_start:
        aligned: list[Optional[float]] = list(series[chart_start - natural_start:])
    elif natural_start == chart_start:
        aligned = list(series)
    else:
        aligned = [None] * (natural_start - chart_start) + list(series)
    return aligned[:length]


def build_chart_data(
    closes: list[float],
    volumes: list[float],
    dates: list[str],
    config: AnalysisConfig,
) -> ChartData:
    """Build aligned chart series over the display window.

    Args:
        closes: Close prices, oldest first.
        volumes: Volumes, same length as closes.
        dates: ISO-8601 dates, same length as closes.
        config: Indicator windows.

    Returns:
        ChartData whose arrays all have ``len(closes) - chart_start`` entries.

    Raises:
        ChartError: If history does not reach past the chart start.
    """
    total = len(closes)
    start = chart_start_index(total, config)

    if total <= start:
        raise ChartError(
            f"Insufficient historical data for chart generation: "
            f"have {total} points, need more than {start}"
        )

    length = total - start

    def align(series: list[float], natural_start: int) -> list[Optional[float]]:
        return align_series(series, natural_start, start, length)

    macd_line, signal_line, histogram = calculate_macd_series(
        closes, config.macd_fast, config.macd_slow, config.macd_signal
    )
    macd_start = config.macd_slow - 1
    signal_start = config.macd_slow + config.macd_signal - 2

    bb_upper, bb_middle, bb_lower = calculate_bollinger_series(
        closes, config.bollinger_period, config.bollinger_std_dev
    )
    bb_start = config.bollinger_period - 1

    return ChartData(
        dates=dates[start:],
        prices=closes[start:],
        volumes=volumes[start:],
        sma_50_values=align(calculate_sma(closes, config.short_moving_average), config.short_moving_average - 1),
        sma_200_values=align(calculate_sma(closes, config.long_moving_average), config.long_moving_average - 1),
        ema_20_values=align(calculate_ema(closes, config.ema_period), config.ema_period - 1),
        rsi_values=align(calculate_rsi_series(closes, config.rsi_period), config.rsi_period),
        macd_values=align(macd_line, macd_start),
        macd_signal_values=align(signal_line, signal_start),
        macd_histogram_values=align(histogram, signal_start),
        bb_upper=align(bb_upper, bb_start),
        bb_middle=align(bb_middle, bb_start),
        bb_lower=align(bb_lower, bb_start),
        volume_sma=align(calculate_sma(volumes, config.volume_period), config.volume_period - 1),
    )
