"""
Snapshot cache - the only shared mutable state around the engine.

Each refresh installs a complete new snapshot in place of the old one under a
lock, so a reader gets either the old snapshot or the new one, never a mix.
Out-of-order refreshes (an older read arriving after a newer one) are
ignored.
"""

import threading
from typing import Dict, Iterable, List, Optional

from hammer.core.auction.snapshot import AuctionSnapshot
from hammer.core.errors import StaleSnapshot
from hammer.utils.logger import get_auction_logger

# Decaying prices move every second; the marketplace re-polls this often.
DEFAULT_REFRESH_INTERVAL = 5


class SnapshotCache:
    """Replace-on-refresh store of the latest snapshot per auction code."""

    def __init__(self, refresh_interval: int = DEFAULT_REFRESH_INTERVAL):
        self.refresh_interval = refresh_interval
        self._snapshots: Dict[str, AuctionSnapshot] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, code: str) -> bool:
        return code in self._snapshots

    def get(self, code: str) -> Optional[AuctionSnapshot]:
        return self._snapshots.get(code)

    def replace(self, snapshot: AuctionSnapshot) -> bool:
        """
        Install a freshly fetched snapshot.

        Returns:
            True if installed, False if the cache already holds a newer read
        """
        code = snapshot.code
        with self._lock:
            held = self._snapshots.get(code)
            if held is not None and snapshot.revision < held.revision:
                get_auction_logger("cache", code).debug(
                    f"Ignoring out-of-order refresh: {snapshot.revision} < {held.revision}"
                )
                return False
            self._snapshots[code] = snapshot
        return True

    def refresh_batch(self, snapshots: Iterable[AuctionSnapshot]) -> int:
        """Install a batch; returns how many were accepted."""
        return sum(1 for s in snapshots if self.replace(s))

    def ensure_current(self, snapshot: AuctionSnapshot) -> None:
        """
        Raises:
            StaleSnapshot: the cache holds a newer read of the same auction
        """
        held = self._snapshots.get(snapshot.code)
        if held is not None and snapshot.revision < held.revision:
            raise StaleSnapshot(snapshot.code, held.revision, snapshot.revision)

    def needs_refresh(self, code: str, now: int) -> bool:
        """True when the held read is missing or older than the refresh interval."""
        held = self._snapshots.get(code)
        if held is None:
            return True
        return now - held.fetched_at >= self.refresh_interval

    def evict(self, code: str) -> None:
        with self._lock:
            self._snapshots.pop(code, None)

    def snapshots(self) -> List[AuctionSnapshot]:
        return list(self._snapshots.values())


__all__ = ["SnapshotCache", "DEFAULT_REFRESH_INTERVAL"]
