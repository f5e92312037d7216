"""History command for StockSignal CLI."""

import click
from rich.table import Table

from stocksignal.cli.common import color_for, console, fail, get_store
from stocksignal.errors import StockSignalError
from stocksignal.utils.validation import require_valid_ticker


@click.command()
@click.argument("ticker")
@click.option(
    "-n", "--limit",
    type=click.IntRange(1, 365),
    default=30,
    show_default=True,
    help="Number of archived signals.",
)
@click.pass_context
def history(ctx: click.Context, ticker: str, limit: int) -> None:
    """Show archived signals for a ticker.

    Signals are archived by ``stocksignal scan --archive``.
    """
    try:
        symbol = require_valid_ticker(ticker)
    except StockSignalError as exc:
        fail(exc)

    rows = get_store(ctx).get_signal_history(symbol, limit=limit)

    if not rows:
        console.print(f"[yellow]No archived signals for {symbol}.[/yellow]")
        return

    table = Table(title=f"{symbol} Signal History", show_header=True, header_style="bold")
    table.add_column("Archived")
    table.add_column("Signal")
    table.add_column("Conf.", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Stop", justify="right")
    table.add_column("Bull/Bear", justify="center")

    for row in rows:
        color = color_for(row.recommendation)
        bull_bear = "-" if row.bullish_count is None else f"{row.bullish_count}/{row.bearish_count}"
        table.add_row(
            row.archived_at[:16].replace("T", " "),
            f"[{color}]{row.recommendation}[/{color}]",
            f"{row.confidence:.0f}%",
            f"{row.price:.2f}",
            f"{row.target_price:.2f}",
            f"{row.stop_loss:.2f}",
            bull_bear,
        )

    console.print(table)
