"""Analyze command for StockSignal CLI."""

import json

import click
from rich.panel import Panel
from rich.table import Table

from stocksignal.cli.common import color_for, console, fail, get_analyzer, get_config, get_store
from stocksignal.errors import StockSignalError
from stocksignal.models import ReasonKind, Signal
from stocksignal.utils.validation import require_valid_ticker

CHART_ROWS = 10

_REASON_STYLES = {
    ReasonKind.BULLISH: "green",
    ReasonKind.BEARISH: "red",
    ReasonKind.NEUTRAL: "dim",
    ReasonKind.WARNING: "yellow",
    ReasonKind.VETO: "bold red",
}


def _fmt(value, pattern: str = ".2f") -> str:
    return "-" if value is None else format(value, pattern)


def _metrics_table(signal: Signal) -> Table:
    m = signal.metrics
    table = Table(title="Indicators", show_header=True, header_style="bold")
    table.add_column("Indicator")
    table.add_column("Value", justify="right")

    table.add_row("SMA 50", _fmt(m.sma_50))
    table.add_row("SMA 200", _fmt(m.sma_200))
    table.add_row("EMA 20", _fmt(m.ema_20))
    table.add_row("RSI", _fmt(m.rsi, ".1f"))
    table.add_row("MACD / Signal", f"{_fmt(m.macd, '.3f')} / {_fmt(m.macd_signal, '.3f')}")
    table.add_row("MACD Histogram", _fmt(m.macd_histogram, ".3f"))
    table.add_row("BB Position", f"{m.bb_position * 100:.0f}%")
    table.add_row("Volume Ratio", f"{m.volume_ratio:.2f}x")
    table.add_row("ATR", _fmt(m.atr))
    table.add_row("Trend Strength", f"{m.trend_strength:+.2f}")
    table.add_row("50d Change", f"{m.price_change_50d:+.1f}%")
    table.add_row("P/E (Fwd)", f"{_fmt(m.pe_ratio, '.1f')} ({_fmt(m.forward_pe, '.1f')})")
    return table


def _chart_table(signal: Signal, rows: int = CHART_ROWS) -> Table:
    chart = signal.chart_data
    table = Table(title=f"Last {rows} sessions", show_header=True, header_style="bold")
    for column in ("Date", "Close", "SMA 50", "SMA 200", "RSI", "MACD Hist", "BB Lower", "BB Upper"):
        table.add_column(column, justify="right")

    for i in range(max(0, len(chart) - rows), len(chart)):
        table.add_row(
            chart.dates[i][:10],
            _fmt(chart.prices[i]),
            _fmt(chart.sma_50_values[i]),
            _fmt(chart.sma_200_values[i]),
            _fmt(chart.rsi_values[i], ".1f"),
            _fmt(chart.macd_histogram_values[i], ".3f"),
            _fmt(chart.bb_lower[i]),
            _fmt(chart.bb_upper[i]),
        )
    return table


def render_signal(signal: Signal, show_chart: bool = False) -> None:
    """Print a signal as rich panels and tables."""
    color = color_for(signal.recommendation)
    summary = signal.signal_summary

    lines = [
        f"[bold]{signal.ticker}[/bold] - ${signal.price:.2f}",
        f"[bold]Recommendation:[/bold] [{color}]{signal.recommendation}[/{color}]"
        f"  (confidence {signal.confidence:.1f}%)",
        f"[bold]Target:[/bold] ${signal.target_price:.2f} ({signal.potential_gain:+.2f}%)",
        f"[bold]Stop Loss:[/bold] ${signal.stop_loss:.2f} (risk {signal.risk:.2f}%)",
        f"[bold]Risk/Reward:[/bold] {signal.risk_reward_ratio:.2f}",
        f"[bold]Indicators:[/bold] {summary.bullish} bullish / {summary.bearish} bearish of {summary.total}",
        "",
        "[bold]Reasons:[/bold]",
    ]
    for reason in signal.reason_details:
        style = _REASON_STYLES[reason.kind]
        lines.append(f"  [{style}]{reason.render()}[/{style}]")

    console.print(Panel(
        "\n".join(lines),
        title="[bold cyan]Signal Analysis[/bold cyan]",
        border_style="cyan",
    ))
    console.print(_metrics_table(signal))

    if show_chart:
        console.print(_chart_table(signal))


@click.command()
@click.argument("ticker")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the signal as JSON.")
@click.option("--no-cache", is_flag=True, default=False, help="Ignore cached signals.")
@click.option("--chart", is_flag=True, default=False, help="Show recent chart series.")
@click.pass_context
def analyze(ctx: click.Context, ticker: str, as_json: bool, no_cache: bool, chart: bool) -> None:
    """Analyze a ticker and print a buy/sell signal.

    TICKER is the symbol to analyze (e.g., AAPL, BRK.B).

    \b
    Examples:
      stocksignal analyze AAPL
      stocksignal analyze MSFT --json
      stocksignal analyze NVDA --chart --no-cache
    """
    try:
        symbol = require_valid_ticker(ticker)
    except StockSignalError as exc:
        fail(exc)

    config = get_config(ctx)
    store = get_store(ctx)

    signal = None if no_cache else store.get_cached(symbol, config.cache_ttl)

    if signal is None:
        if not as_json:
            console.print(f"[dim]Analyzing {symbol}...[/dim]")
        try:
            signal = get_analyzer(ctx).analyze(symbol)
        except StockSignalError as exc:
            if as_json:
                click.echo(json.dumps(exc.to_dict(), indent=2))
                raise SystemExit(1)
            fail(exc)
        store.cache_signal(signal)

    if as_json:
        click.echo(json.dumps(signal.to_json_dict(), indent=2))
        return

    render_signal(signal, show_chart=chart)
