"""
Unit tests for the watchlist store.
"""

import pytest

from hammer.core.protocol import AuctionProtocol
from hammer.core.storage import BIDS, WATCHLIST, SQLiteAdapter, WatchlistEntry, WatchlistStore
from hammer.crypto import UINT256_MAX

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


@pytest.fixture
def store(tmp_path):
    store = WatchlistStore(tmp_path / "data")
    yield store
    store.close()


class TestMembership:
    """Add, remove, toggle and contains."""

    def test_add_and_contains(self, store):
        assert store.add("Linear", 3, OWNER)
        assert store.contains(AuctionProtocol.LINEAR, 3, OWNER)
        assert not store.contains("Exponential", 3, OWNER)

    def test_add_twice(self, store):
        assert store.add("Linear", 3, OWNER)
        assert not store.add("Linear", 3, OWNER)
        assert len(store.entries(OWNER)) == 1

    def test_remove(self, store):
        store.add("Linear", 3, OWNER)
        assert store.remove("Linear", 3, OWNER)
        assert not store.remove("Linear", 3, OWNER)
        assert store.entries(OWNER) == []

    def test_toggle(self, store):
        assert store.toggle("Vickrey", 1, OWNER) is True
        assert store.contains("Vickrey", 1, OWNER)
        assert store.toggle("Vickrey", 1, OWNER) is False
        assert not store.contains("Vickrey", 1, OWNER)

    def test_lists_are_separate(self, store):
        store.add("English", 1, OWNER, WATCHLIST)
        store.add("English", 2, OWNER, BIDS)
        assert [e.numeric_id for e in store.entries(OWNER, WATCHLIST)] == [1]
        assert [e.numeric_id for e in store.entries(OWNER, BIDS)] == [2]

    def test_owner_case_insensitive(self, store):
        store.add("Linear", 3, OWNER.lower())
        assert store.contains("Linear", 3, OWNER.upper().replace("0X", "0x"))

    def test_owners_are_separate(self, store):
        store.add("Linear", 3, OWNER)
        assert store.entries() == []
        store.add("Linear", 4)
        assert [e.numeric_id for e in store.entries()] == [4]

    def test_clear(self, store):
        for i in range(3):
            store.add("Linear", i, OWNER)
        assert store.clear(OWNER) == 3
        assert store.entries(OWNER) == []


class TestEntries:
    """Listing tracked auctions."""

    def test_order_and_codes(self, store):
        store.add("Logarithmic", 9, OWNER)
        store.add("Linear", 7, OWNER)
        assert store.entries(OWNER) == [
            WatchlistEntry(AuctionProtocol.LOGARITHMIC, 9),
            WatchlistEntry(AuctionProtocol.LINEAR, 7),
        ]
        assert store.codes(OWNER) == ["TG9nYXJpdGhtaWM6OQ", "TGluZWFyOjc"]

    def test_uint256_ids(self, store):
        store.add("English", UINT256_MAX, OWNER)
        (entry,) = store.entries(OWNER)
        assert entry.numeric_id == UINT256_MAX
        assert entry.auction_id.numeric_id == UINT256_MAX

    def test_invalid_keys(self, store):
        with pytest.raises(LookupError):
            store.add("Dutch", 1, OWNER)
        with pytest.raises(ValueError):
            store.add("Linear", -1, OWNER)


class TestPersistence:
    """Lists survive a restart."""

    def test_reopen(self, tmp_path):
        first = WatchlistStore(tmp_path)
        first.add("Vickrey", 5, OWNER, BIDS)
        first.close()

        second = WatchlistStore(tmp_path)
        try:
            assert second.contains("Vickrey", 5, OWNER, BIDS)
        finally:
            second.close()

    def test_adapter_creates_directory(self, tmp_path):
        adapter = SQLiteAdapter(tmp_path / "nested" / "dir" / "db.sqlite")
        try:
            assert adapter.insert_entry("o", "l", "Linear", "1", 0)
            assert adapter.get_entries("o", "l") == [("Linear", "1")]
        finally:
            adapter.close()
