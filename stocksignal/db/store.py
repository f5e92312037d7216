"""SQLite data store for StockSignal."""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from stocksignal.models import RunStatus, SavedSignal, Signal, SignalRun

logger = logging.getLogger(__name__)


def cache_key(ticker: str) -> str:
    """Cache key for a ticker's latest signal."""
    return f"stock:{ticker.upper()}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SignalStore:
    """SQLite-based store for cached and archived signals."""

    REQUIRED_TABLES = [
        "signal_cache",
        "ticker_signals",
        "signal_runs",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Create tables on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS signal_cache (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    cached_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS ticker_signals (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    ticker TEXT NOT NULL,
                    recommendation TEXT NOT NULL,
                    confidence REAL NOT NULL,
                    price REAL NOT NULL,
                    target_price REAL NOT NULL,
                    stop_loss REAL NOT NULL,
                    potential_gain REAL NOT NULL,
                    risk REAL NOT NULL,
                    risk_reward_ratio REAL NOT NULL,
                    bullish_count INTEGER,
                    bearish_count INTEGER,
                    reasons TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    archived_at TEXT NOT NULL,
                    UNIQUE(ticker, archived_at)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS signal_runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    tickers_analyzed INTEGER NOT NULL,
                    signals_saved INTEGER NOT NULL,
                    duration_ms INTEGER,
                    status TEXT NOT NULL,
                    error_message TEXT,
                    run_timestamp TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Cache ====================

    def cache_signal(self, signal: Signal) -> None:
        """Cache a signal under ``stock:{TICKER}``, replacing any previous entry."""
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO signal_cache (key, payload, cached_at)
                VALUES (?, ?, ?)
                """,
                (cache_key(signal.ticker), signal.model_dump_json(by_alias=True), _now()),
            )
            conn.commit()
        finally:
            conn.close()

    def get_cached(self, ticker: str, ttl: int) -> Optional[Signal]:
        """Get a cached signal if it is not older than ``ttl`` seconds.

        Args:
            ticker: Ticker symbol.
            ttl: Maximum age in seconds.

        Returns:
            Cached Signal, or None if missing, expired or unreadable.
        """
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT payload, cached_at FROM signal_cache WHERE key = ?",
                (cache_key(ticker),),
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None

        cached_at = datetime.fromisoformat(row["cached_at"])
        age = (datetime.now(timezone.utc) - cached_at).total_seconds()
        if age > ttl:
            return None

        try:
            return Signal.model_validate_json(row["payload"])
        except ValueError:
            logger.warning("Discarding unreadable cache entry for %s", ticker)
            return None

    # ==================== Archive ====================

    def save_signals(self, signals: Iterable[Signal], archived_at: Optional[str] = None) -> int:
        """Archive a batch of signals under one snapshot timestamp.

        Args:
            signals: Signals to save.
            archived_at: Snapshot timestamp (defaults to now).

        Returns:
            Number of rows written.
        """
        rows = [
            (
                s.ticker,
                s.recommendation,
                s.confidence,
                s.price,
                s.target_price,
                s.stop_loss,
                s.potential_gain,
                s.risk,
                s.risk_reward_ratio,
                s.signal_summary.bullish,
                s.signal_summary.bearish,
                json.dumps(s.reasons),
                s.timestamp,
            )
            for s in signals
        ]
        if not rows:
            return 0

        snapshot = archived_at or _now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO ticker_signals (
                    ticker, recommendation, confidence, price, target_price, stop_loss,
                    potential_gain, risk, risk_reward_ratio, bullish_count, bearish_count,
                    reasons, timestamp, archived_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [row + (snapshot,) for row in rows],
            )
            conn.commit()
            return len(rows)
        finally:
            conn.close()

    def _row_to_saved(self, row: sqlite3.Row) -> SavedSignal:
        data = dict(row)
        data["reasons"] = json.loads(data["reasons"])
        return SavedSignal(**data)

    def get_signal_history(self, ticker: str, limit: int = 30) -> list[SavedSignal]:
        """Get archived signals for one ticker, newest first."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                """
                SELECT * FROM ticker_signals
                WHERE ticker = ?
                ORDER BY archived_at DESC, timestamp DESC
                LIMIT ?
                """,
                (ticker.upper(), limit),
            ).fetchall()
            return [self._row_to_saved(row) for row in rows]
        finally:
            conn.close()

    def get_latest_signals(
        self,
        recommendation: Optional[str] = None,
        limit: int = 50,
    ) -> list[SavedSignal]:
        """Get signals from the most recent snapshot, best potential gain first.

        Args:
            recommendation: Only return this recommendation, if given.
            limit: Maximum rows.
        """
        query = """
            SELECT * FROM ticker_signals
            WHERE archived_at = (SELECT MAX(archived_at) FROM ticker_signals)
        """
        params: list = []

        if recommendation:
            query += " AND recommendation = ?"
            params.append(recommendation)

        query += " ORDER BY potential_gain DESC LIMIT ?"
        params.append(limit)

        conn = self._get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_saved(row) for row in rows]
        finally:
            conn.close()

    # ==================== Runs ====================

    def save_run(
        self,
        tickers_analyzed: int,
        signals_saved: int,
        duration_ms: Optional[int],
        status: RunStatus,
        error_message: Optional[str] = None,
    ) -> None:
        """Record the outcome of an archive run."""
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO signal_runs (
                    tickers_analyzed, signals_saved, duration_ms, status,
                    error_message, run_timestamp
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (tickers_analyzed, signals_saved, duration_ms, status, error_message, _now()),
            )
            conn.commit()
        finally:
            conn.close()

    def get_signal_runs(self, limit: int = 20) -> list[SignalRun]:
        """Get recorded archive runs, newest first."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM signal_runs ORDER BY run_timestamp DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
            return [SignalRun(**dict(row)) for row in rows]
        finally:
            conn.close()
