"""
Persistent Storage Module.

Provides SQLite-backed persistence for:
- Watchlists (auctions a user follows)
- Participation lists (auctions a user bid on or bought from)
"""

from hammer.core.storage.sqlite_adapter import SQLiteAdapter
from hammer.core.storage.watchlist import (
    WatchlistStore,
    WatchlistEntry,
    WATCHLIST,
    BIDS,
)

__all__ = ["SQLiteAdapter", "WatchlistStore", "WatchlistEntry", "WATCHLIST", "BIDS"]
