"""Signal cache and archive storage."""

from stocksignal.db.store import SignalStore, cache_key

__all__ = ["SignalStore", "cache_key"]
