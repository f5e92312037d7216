"""Batch, scan and discover commands for StockSignal CLI."""

import json
import logging
import time

import click
from rich.table import Table

from stocksignal.analysis.analyzer import rank_signals
from stocksignal.cli.common import color_for, console, error_panel, get_analyzer, get_store
from stocksignal.data.discovery import STRATEGIES, TickerDiscovery
from stocksignal.models import Signal
from stocksignal.utils.validation import validate_ticker

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 10
MAX_SCAN_LIMIT = 50


def _signals_table(title: str, signals: list[Signal]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Ticker", style="cyan")
    table.add_column("Signal")
    table.add_column("Conf.", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Stop", justify="right")
    table.add_column("Gain", justify="right")
    table.add_column("R/R", justify="right")

    for s in signals:
        color = color_for(s.recommendation)
        table.add_row(
            s.ticker,
            f"[{color}]{s.recommendation}[/{color}]",
            f"{s.confidence:.0f}%",
            f"{s.price:.2f}",
            f"{s.target_price:.2f}",
            f"{s.stop_loss:.2f}",
            f"{s.potential_gain:+.2f}%",
            f"{s.risk_reward_ratio:.2f}",
        )
    return table


@click.command()
@click.argument("tickers", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON.")
@click.pass_context
def batch(ctx: click.Context, tickers: tuple[str, ...], as_json: bool) -> None:
    """Analyze up to 10 tickers concurrently.

    Invalid tickers are reported before anything is fetched.

    \b
    Examples:
      stocksignal batch AAPL MSFT GOOGL
    """
    if len(tickers) > MAX_BATCH_SIZE:
        error_panel(f"Maximum {MAX_BATCH_SIZE} tickers allowed per batch, got {len(tickers)}")

    checks = [validate_ticker(t) for t in tickers]
    invalid = [(raw, check) for raw, check in zip(tickers, checks) if not check.is_valid]
    if invalid:
        lines = ["Invalid tickers:"]
        for raw, check in invalid:
            lines.append(f"  {raw!r}: {'; '.join(check.errors)}")
        error_panel("\n".join(lines), title="VALIDATION_ERROR")

    symbols = [check.sanitized_ticker for check in checks]
    if not as_json:
        console.print(f"[dim]Analyzing {len(symbols)} tickers...[/dim]")

    results = get_analyzer(ctx).analyze_batch(symbols)

    if as_json:
        payload = [
            {"ticker": r.ticker, "success": r.ok, "signal": r.signal.to_json_dict() if r.ok else None, "error": r.error}
            for r in results
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    succeeded = [r.signal for r in results if r.ok]
    if succeeded:
        console.print(_signals_table("Batch Results", succeeded))
    for r in results:
        if not r.ok:
            console.print(f"[red]✗ {r.ticker}: {r.error}[/red]")

    console.print(f"\n[bold]{len(succeeded)}/{len(results)}[/bold] tickers analyzed")


@click.command()
@click.option(
    "-s", "--strategy",
    type=click.Choice(STRATEGIES),
    default="trending",
    show_default=True,
    help="Where to source tickers from.",
)
@click.option(
    "-n", "--limit",
    type=click.IntRange(1, MAX_SCAN_LIMIT),
    default=20,
    show_default=True,
    help="Number of tickers to scan.",
)
@click.option("--archive", is_flag=True, default=False, help="Save signals and a run record.")
@click.pass_context
def scan(ctx: click.Context, strategy: str, limit: int, archive: bool) -> None:
    """Scan the market and rank tickers by potential gain.

    \b
    Examples:
      stocksignal scan
      stocksignal scan --strategy gainers --limit 10
      stocksignal scan --strategy mixed --archive
    """
    analyzer = get_analyzer(ctx)
    started = time.monotonic()

    tickers = TickerDiscovery(analyzer.source, strategy=strategy, limit=limit).fetch_tickers()
    console.print(f"[dim]Scanning {len(tickers)} tickers ({strategy})...[/dim]")

    results = analyzer.analyze_batch(tickers)
    signals = rank_signals(results)
    failures = [r for r in results if not r.ok]

    if signals:
        console.print(_signals_table(f"Scan Results ({strategy})", signals))
    else:
        console.print("[yellow]No signals produced.[/yellow]")

    if failures:
        console.print(f"[dim]{len(failures)} tickers failed: {', '.join(r.ticker for r in failures)}[/dim]")

    if not archive:
        return

    store = get_store(ctx)
    saved = store.save_signals(signals)
    duration_ms = int((time.monotonic() - started) * 1000)

    if not signals:
        status = "failed"
    elif failures:
        status = "partial"
    else:
        status = "success"
    error_message = "; ".join(f"{r.ticker}: {r.error}" for r in failures) or None

    store.save_run(len(tickers), saved, duration_ms, status, error_message)
    logger.info("Archived %d signals from %d tickers (%s)", saved, len(tickers), status)
    console.print(f"[green]Archived {saved} signals ({status}).[/green]")


@click.command()
@click.option(
    "-s", "--strategy",
    type=click.Choice(STRATEGIES),
    default="trending",
    show_default=True,
    help="Listing to fetch.",
)
@click.option(
    "-n", "--limit",
    type=click.IntRange(1, 100),
    default=20,
    show_default=True,
    help="Number of tickers.",
)
@click.pass_context
def discover(ctx: click.Context, strategy: str, limit: int) -> None:
    """List tickers from a market listing.

    \b
    Examples:
      stocksignal discover --strategy losers
    """
    analyzer = get_analyzer(ctx)
    tickers = TickerDiscovery(analyzer.source, strategy=strategy, limit=limit).fetch_tickers()

    table = Table(title=f"Tickers ({strategy})", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Ticker", style="cyan")
    for i, ticker in enumerate(tickers, 1):
        table.add_row(str(i), ticker)

    console.print(table)
