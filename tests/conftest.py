"""
Shared fixtures: snapshot and raw contract record factories.

Addresses are the EIP-55 reference vectors, so they are already in
checksum form and survive the mapper unchanged.
"""

import pytest

from hammer.core.auction import AuctionSnapshot, AuctionedAsset, BiddingAsset
from hammer.core.identity import AuctionId
from hammer.core.protocol import AuctionProtocol
from hammer.crypto import ZERO_ADDRESS

AUCTIONEER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
BIDDER = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ERC20_TOKEN = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
NFT_TOKEN = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"


@pytest.fixture
def addresses():
    return {
        "auctioneer": AUCTIONEER,
        "bidder": BIDDER,
        "erc20": ERC20_TOKEN,
        "nft": NFT_TOKEN,
    }


@pytest.fixture
def make_snapshot():
    """Build an AuctionSnapshot with sensible defaults per protocol."""

    def _make(
        protocol,
        numeric_id=1,
        starting_price=100,
        reserved_price=20,
        duration=1000,
        deadline=11_000,
        is_claimed=False,
        current_highest_bid=0,
        min_bid_delta=0,
        commit_phase_end=1000,
        reveal_phase_end=2000,
        bidding_token=ZERO_ADDRESS,
        winner=ZERO_ADDRESS,
        fetched_at=0,
        block_number=0,
    ):
        protocol = AuctionProtocol.parse(protocol)
        extra = {}
        if protocol.is_sealed_bid:
            extra = dict(commit_phase_end=commit_phase_end, reveal_phase_end=reveal_phase_end)
            deadline = reveal_phase_end
            duration = 0
        if not protocol.is_decaying:
            reserved_price = 0
        return AuctionSnapshot(
            id=AuctionId(protocol, numeric_id),
            auctioneer=AUCTIONEER,
            winner=winner,
            auctioned_asset=AuctionedAsset(NFT_TOKEN, 7, True),
            bidding_asset=BiddingAsset(bidding_token),
            starting_price=starting_price,
            reserved_price=reserved_price,
            available_funds=0,
            deadline=deadline,
            duration=duration,
            is_claimed=is_claimed,
            current_highest_bid=current_highest_bid,
            min_bid_delta=min_bid_delta,
            fetched_at=fetched_at,
            block_number=block_number,
            **extra,
        )

    return _make


def _head(numeric_id, auction_type=0, id_or_amount=7, bidding_token=ERC20_TOKEN):
    return [
        numeric_id,
        "Lot",
        "A test lot",
        "https://example.com/lot.png",
        AUCTIONEER.lower(),
        auction_type,
        NFT_TOKEN,
        id_or_amount,
        bidding_token,
    ]


@pytest.fixture
def decaying_record():
    """Raw 16-field record of a Linear/Exponential/Logarithmic contract."""

    def _make(numeric_id=3, starting_price=100, reserved_price=20, deadline=11_000,
              duration=1000, is_claimed=False, winner=ZERO_ADDRESS, **head):
        return _head(numeric_id, **head) + [
            starting_price,
            0,                # available_funds
            reserved_price,
            winner,
            deadline,
            duration,
            is_claimed,
        ]

    return _make


@pytest.fixture
def ascending_record():
    """Raw 17-field record of the English contract."""

    def _make(numeric_id=4, starting_bid=10, min_bid_delta=1, highest_bid=0,
              deadline=11_000, duration=1000, is_claimed=False, winner=ZERO_ADDRESS, **head):
        return _head(numeric_id, **head) + [
            starting_bid,
            0,                # available_funds
            min_bid_delta,
            highest_bid,
            winner,
            deadline,
            duration,
            is_claimed,
        ]

    return _make


@pytest.fixture
def sealed_record():
    """Raw 16-field record of the Vickrey contract."""

    def _make(numeric_id=5, starting_bid=10, winning_bid=0, commit_end=1000,
              reveal_end=2000, is_claimed=False, winner=ZERO_ADDRESS, **head):
        return _head(numeric_id, **head) + [
            starting_bid,
            0,                # available_funds
            winning_bid,
            winner,
            commit_end,
            reveal_end,
            is_claimed,
        ]

    return _make
