import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from hammer.core.identity import AuctionId, encode
from hammer.core.protocol import AuctionProtocol
from hammer.core.storage.sqlite_adapter import SQLiteAdapter
from hammer.crypto import to_checksum_address
from hammer.utils.logger import get_logger

logger = get_logger("storage.watchlist")

# List names
WATCHLIST = "Watchlist"
BIDS = "Bids"  # Auctions the user bid on or bought from

ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class WatchlistEntry:
    """A tracked (protocol, on-chain id) pair."""
    protocol: AuctionProtocol
    numeric_id: int

    @property
    def code(self) -> str:
        return encode(self.protocol, self.numeric_id)

    @property
    def auction_id(self) -> AuctionId:
        return AuctionId(self.protocol, self.numeric_id)


class WatchlistStore:
    """
    Persistent per-user sets of tracked auctions.

    Not consulted for any pricing decision; only for display state
    (the heart on an auction card, the "my bids" dashboard).
    """

    def __init__(self, data_dir: Path, db_name: str = "watchlist.db"):
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_name
        self.adapter = SQLiteAdapter(self.db_path)

        logger.info(f"WatchlistStore initialized at {self.db_path}")

    @staticmethod
    def _owner(owner: str) -> str:
        # Same account must map to the same rows whatever casing the wallet used
        if not owner:
            return ANONYMOUS
        try:
            return to_checksum_address(owner)
        except ValueError:
            return owner

    @staticmethod
    def _key(protocol: Union[AuctionProtocol, str], numeric_id: int):
        protocol = AuctionProtocol.parse(protocol)
        encode(protocol, numeric_id)  # validates the id range
        return protocol.tag, str(numeric_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, protocol, numeric_id: int, owner: str = "", list_name: str = WATCHLIST) -> bool:
        """Track an auction. Returns False if it was already tracked."""
        tag, key = self._key(protocol, numeric_id)
        added = self.adapter.insert_entry(self._owner(owner), list_name, tag, key, int(time.time()))
        if added:
            logger.info(f"Added {tag} #{key} to {list_name}")
        return added

    def remove(self, protocol, numeric_id: int, owner: str = "", list_name: str = WATCHLIST) -> bool:
        """Stop tracking an auction. Returns False if it was not tracked."""
        tag, key = self._key(protocol, numeric_id)
        removed = self.adapter.delete_entry(self._owner(owner), list_name, tag, key)
        if removed:
            logger.info(f"Removed {tag} #{key} from {list_name}")
        return removed

    def toggle(self, protocol, numeric_id: int, owner: str = "", list_name: str = WATCHLIST) -> bool:
        """Flip membership; returns the new membership."""
        if self.contains(protocol, numeric_id, owner, list_name):
            self.remove(protocol, numeric_id, owner, list_name)
            return False
        self.add(protocol, numeric_id, owner, list_name)
        return True

    def clear(self, owner: str = "", list_name: str = WATCHLIST) -> int:
        return self.adapter.delete_list(self._owner(owner), list_name)

    # =========================================================================
    # Queries
    # =========================================================================

    def contains(self, protocol, numeric_id: int, owner: str = "", list_name: str = WATCHLIST) -> bool:
        tag, key = self._key(protocol, numeric_id)
        return self.adapter.has_entry(self._owner(owner), list_name, tag, key)

    def entries(self, owner: str = "", list_name: str = WATCHLIST) -> List[WatchlistEntry]:
        """Tracked auctions in the order they were added."""
        entries = []
        for tag, key in self.adapter.get_entries(self._owner(owner), list_name):
            entries.append(WatchlistEntry(AuctionProtocol.parse(tag), int(key)))
        return entries

    def codes(self, owner: str = "", list_name: str = WATCHLIST) -> List[str]:
        return [e.code for e in self.entries(owner, list_name)]

    def close(self):
        self.adapter.close()
