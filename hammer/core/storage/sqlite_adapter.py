import sqlite3
import threading
from pathlib import Path
from typing import List, Tuple

from hammer.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteAdapter:
    """
    SQLite backend for the user's tracked auctions.

    Stores (owner, list, protocol, on-chain id) membership rows. On-chain ids
    are uint256 and do not fit SQLite INTEGER, so they are kept as decimal
    TEXT.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn_local = threading.local()

        # Ensure directory exists
        if not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            # Enable WAL mode for better concurrency
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tracked_auctions (
                    owner TEXT NOT NULL,
                    list_name TEXT NOT NULL,
                    protocol TEXT NOT NULL,
                    auction_id TEXT NOT NULL,
                    added_at INTEGER NOT NULL,
                    PRIMARY KEY (owner, list_name, protocol, auction_id)
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_tracked_owner "
                "ON tracked_auctions(owner, list_name);"
            )

    def close(self):
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            del self._conn_local.conn

    # =========================================================================
    # Membership Operations
    # =========================================================================

    def insert_entry(self, owner: str, list_name: str, protocol: str, auction_id: str, added_at: int) -> bool:
        """Insert a row; returns False if it already existed."""
        conn = self._get_conn()
        with conn:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO tracked_auctions "
                "(owner, list_name, protocol, auction_id, added_at) VALUES (?, ?, ?, ?, ?)",
                (owner, list_name, protocol, auction_id, added_at)
            )
        return cursor.rowcount > 0

    def delete_entry(self, owner: str, list_name: str, protocol: str, auction_id: str) -> bool:
        """Delete a row; returns False if it was not there."""
        conn = self._get_conn()
        with conn:
            cursor = conn.execute(
                "DELETE FROM tracked_auctions "
                "WHERE owner = ? AND list_name = ? AND protocol = ? AND auction_id = ?",
                (owner, list_name, protocol, auction_id)
            )
        return cursor.rowcount > 0

    def has_entry(self, owner: str, list_name: str, protocol: str, auction_id: str) -> bool:
        conn = self._get_conn()
        cursor = conn.execute(
            "SELECT 1 FROM tracked_auctions "
            "WHERE owner = ? AND list_name = ? AND protocol = ? AND auction_id = ?",
            (owner, list_name, protocol, auction_id)
        )
        return cursor.fetchone() is not None

    def get_entries(self, owner: str, list_name: str) -> List[Tuple[str, str]]:
        """Get all (protocol, auction_id) rows of a list, oldest first."""
        conn = self._get_conn()
        cursor = conn.execute(
            "SELECT protocol, auction_id FROM tracked_auctions "
            "WHERE owner = ? AND list_name = ? ORDER BY added_at ASC, rowid ASC",
            (owner, list_name)
        )
        return [(row['protocol'], row['auction_id']) for row in cursor]

    def delete_list(self, owner: str, list_name: str) -> int:
        conn = self._get_conn()
        with conn:
            cursor = conn.execute(
                "DELETE FROM tracked_auctions WHERE owner = ? AND list_name = ?",
                (owner, list_name)
            )
        return cursor.rowcount
