"""Helpers shared by CLI commands."""

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.panel import Panel

from stocksignal.config import DEFAULT_DB_PATH, AnalysisConfig, load_config
from stocksignal.errors import StockSignalError

console = Console()

RECOMMENDATION_COLORS = {
    "STRONG BUY": "bold green",
    "BUY": "green",
    "HOLD": "yellow",
    "SELL": "red",
    "STRONG SELL": "bold red",
}


def error_panel(message: str, title: str = "Error") -> NoReturn:
    """Print a red error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def fail(exc: StockSignalError) -> NoReturn:
    """Report a StockSignal error and exit."""
    lines = [exc.message]
    if isinstance(exc.details, list):
        lines.extend(f"  • {item}" for item in exc.details)
    error_panel("\n".join(lines), title=exc.code)


def get_config(ctx: click.Context) -> AnalysisConfig:
    """Configuration for this invocation, loaded once per context."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        path = obj.get("config_path")
        try:
            obj["config"] = load_config(Path(path) if path else None)
        except (ValueError, OSError) as exc:
            error_panel(f"Invalid configuration: {exc}", title="Configuration Error")
    return obj["config"]


def get_analyzer(ctx: click.Context):
    """Analyzer for this invocation."""
    obj = ctx.ensure_object(dict)
    if "analyzer" not in obj:
        from stocksignal.analysis.analyzer import StockAnalyzer

        obj["analyzer"] = StockAnalyzer(config=get_config(ctx))
    return obj["analyzer"]


def get_store(ctx: click.Context):
    """Signal store for this invocation."""
    obj = ctx.ensure_object(dict)
    if "store" not in obj:
        from stocksignal.db.store import SignalStore

        obj["store"] = SignalStore(Path(obj.get("db_path") or DEFAULT_DB_PATH))
    return obj["store"]


def color_for(recommendation: str) -> str:
    return RECOMMENDATION_COLORS.get(recommendation, "white")
