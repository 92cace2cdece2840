"""
Auction snapshots - immutable point-in-time reads of on-chain auction state.

Two stages are kept as distinct types:
1. AuctionSnapshot: the normalized contract record, straight out of the mapper.
2. EnrichedSnapshot: a snapshot plus the values derived from it at one
   instant (current price, minimum next bid, phase, display status).

A snapshot is never mutated. A refresh builds a new one and swaps it in
whole (see cache.SnapshotCache), so readers never observe a mix of old and
new fields.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from hammer.core.identity import AuctionId
from hammer.core.protocol import AuctionProtocol
from hammer.crypto import ZERO_ADDRESS, is_zero_address
from hammer.utils.validation import validate_amount, validate_timestamp


# =============================================================================
# Assets
# =============================================================================


@dataclass(frozen=True)
class AuctionedAsset:
    """The token being sold."""
    token_address: str
    id_or_amount: int
    is_non_fungible: bool
    symbol: str = ""


@dataclass(frozen=True)
class BiddingAsset:
    """The token bids and purchases are paid in."""
    token_address: str
    symbol: str = ""

    @property
    def is_native(self) -> bool:
        """Zero address means the chain's native currency."""
        return is_zero_address(self.token_address)


# =============================================================================
# Snapshot
# =============================================================================


@dataclass(frozen=True)
class AuctionSnapshot:
    """
    Normalized on-chain state of one auction.

    All amounts are integers in the bidding token's base units (wei for an
    18-decimal token). All times are whole seconds since the epoch.

    Attributes:
        id: Protocol and on-chain id
        auctioneer: Seller address
        winner: Winner/buyer address (zero address while unset)
        starting_price: Decaying start price, or starting bid
        reserved_price: Decaying floor (0 for other protocols)
        available_funds: Proceeds waiting for the auctioneer
        current_highest_bid: Highest (ascending) or winning (sealed) bid
        min_bid_delta: Minimum increment over the highest bid (ascending)
        deadline: End of the auction (end of reveal for sealed bids)
        duration: Length of the auction in seconds
        is_claimed: Terminal flag, nothing can change once set
        commit_phase_end: End of commit window (sealed bids only)
        reveal_phase_end: End of reveal window (sealed bids only)
        fetched_at: Wall-clock second the record was read
        block_number: Block the record was read at (0 if unknown)
    """
    id: AuctionId
    auctioneer: str
    winner: str
    auctioned_asset: AuctionedAsset
    bidding_asset: BiddingAsset
    starting_price: int
    reserved_price: int
    available_funds: int
    deadline: int
    duration: int
    is_claimed: bool
    current_highest_bid: int = 0
    min_bid_delta: int = 0
    commit_phase_end: Optional[int] = None
    reveal_phase_end: Optional[int] = None
    name: str = ""
    description: str = ""
    image_url: str = ""
    fetched_at: int = 0
    block_number: int = 0

    def __post_init__(self):
        for name in (
            "starting_price", "reserved_price", "available_funds",
            "current_highest_bid", "min_bid_delta",
        ):
            valid, err = validate_amount(getattr(self, name), name)
            if not valid:
                raise ValueError(err)

        for name in ("deadline", "duration", "fetched_at", "block_number"):
            valid, err = validate_timestamp(getattr(self, name), name)
            if not valid:
                raise ValueError(err)

        if self.duration > self.deadline:
            raise ValueError(
                f"duration {self.duration} reaches back before time 0 "
                f"from deadline {self.deadline}"
            )

        if self.protocol.is_decaying and self.reserved_price > self.starting_price:
            raise ValueError(
                f"reserved_price {self.reserved_price} exceeds "
                f"starting_price {self.starting_price}"
            )

        if self.protocol.is_sealed_bid:
            if self.commit_phase_end is None or self.reveal_phase_end is None:
                raise ValueError("Sealed-bid snapshot needs both phase ends")
            for name in ("commit_phase_end", "reveal_phase_end"):
                valid, err = validate_timestamp(getattr(self, name), name)
                if not valid:
                    raise ValueError(err)
            if self.commit_phase_end > self.reveal_phase_end:
                raise ValueError("commit_phase_end is after reveal_phase_end")

    @property
    def protocol(self) -> AuctionProtocol:
        return self.id.protocol

    @property
    def code(self) -> str:
        return self.id.code

    @property
    def start_time(self) -> int:
        return self.deadline - self.duration

    @property
    def has_winner(self) -> bool:
        return not is_zero_address(self.winner)

    @property
    def is_native_payment(self) -> bool:
        return self.bidding_asset.is_native

    @property
    def revision(self) -> tuple:
        """Ordering key used to decide which of two reads is newer."""
        return (self.block_number, self.fetched_at)


# =============================================================================
# Enriched snapshot
# =============================================================================


class AuctionStatus(str, Enum):
    """Display status of an auction at one instant."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDED = "ended"
    CLAIMED = "claimed"


@dataclass(frozen=True)
class EnrichedSnapshot:
    """
    A snapshot together with everything computed from it at `as_of`.

    Only built by pricing.enrich(), which fills every field in one go.
    Fields that do not apply to the protocol are None.
    """
    snapshot: AuctionSnapshot
    as_of: int
    status: AuctionStatus
    current_price: Optional[int] = None
    minimum_next_bid: Optional[int] = None
    phase: Optional[Any] = None

    @property
    def code(self) -> str:
        return self.snapshot.code

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; big integers are rendered as strings."""
        s = self.snapshot
        return {
            "id": s.code,
            "protocol": s.protocol.tag,
            "onchain_id": str(s.id.numeric_id),
            "name": s.name,
            "description": s.description,
            "image_url": s.image_url,
            "auctioneer": s.auctioneer,
            "winner": s.winner,
            "auctioned_token": s.auctioned_asset.token_address,
            "auctioned_token_symbol": s.auctioned_asset.symbol,
            "auctioned_id_or_amount": str(s.auctioned_asset.id_or_amount),
            "is_nft": s.auctioned_asset.is_non_fungible,
            "bidding_token": s.bidding_asset.token_address,
            "bidding_token_symbol": s.bidding_asset.symbol,
            "starting_price": str(s.starting_price),
            "reserved_price": str(s.reserved_price),
            "available_funds": str(s.available_funds),
            "highest_bid": str(s.current_highest_bid),
            "deadline": s.deadline,
            "duration": s.duration,
            "is_claimed": s.is_claimed,
            "status": self.status.value,
            "as_of": self.as_of,
            "current_price": None if self.current_price is None else str(self.current_price),
            "minimum_next_bid": None if self.minimum_next_bid is None else str(self.minimum_next_bid),
            "phase": None if self.phase is None else self.phase.name.lower(),
        }


# =============================================================================
# Bid history
# =============================================================================


@dataclass(frozen=True)
class Bid:
    """An accepted bid on an ascending auction. Never mutated."""
    auction_id: AuctionId
    bidder: str
    amount: int
    timestamp: int


__all__ = [
    "AuctionedAsset",
    "BiddingAsset",
    "AuctionSnapshot",
    "AuctionStatus",
    "EnrichedSnapshot",
    "Bid",
    "ZERO_ADDRESS",
]
