"""
Hammer Auction Module.

This module provides the auction pricing and phase-state engine:
- Raw contract record mapping into snapshots
- Decaying-price curves and ascending-bid rules
- Sealed-bid commit/reveal phase resolution
- Protocol dispatch and transaction plan building
- Replace-on-refresh snapshot cache
"""

from hammer.core.auction.snapshot import (
    AuctionedAsset,
    BiddingAsset,
    AuctionSnapshot,
    AuctionStatus,
    EnrichedSnapshot,
    Bid,
)

from hammer.core.auction.mapper import (
    map_raw_auction,
    map_raw_auction_strict,
    map_auction_batch,
    listing_window,
    parse_bid_event,
    bid_history,
    LAYOUTS,
)

from hammer.core.auction.phase import (
    Phase,
    phase,
    phase_at,
    require_phase,
    seconds_until_next_phase,
)

from hammer.core.auction.pricing import (
    elapsed,
    decay_factor,
    current_price,
    check_purchase,
    minimum_next_bid,
    check_bid,
    is_bid_valid,
    sealed_bid_price,
    quote,
    status,
    enrich,
)

from hammer.core.auction.operations import (
    ContractCall,
    TransactionPlan,
    CreateAuctionParams,
)

from hammer.core.auction.cache import SnapshotCache

from hammer.core.auction.service import (
    AuctionService,
    AscendingAuctionService,
    DecayingAuctionService,
    SealedBidAuctionService,
    ServiceRegistry,
    service_for,
)

__all__ = [
    # Snapshots
    "AuctionedAsset",
    "BiddingAsset",
    "AuctionSnapshot",
    "AuctionStatus",
    "EnrichedSnapshot",
    "Bid",
    # Mapping
    "map_raw_auction",
    "map_raw_auction_strict",
    "map_auction_batch",
    "listing_window",
    "parse_bid_event",
    "bid_history",
    "LAYOUTS",
    # Phases
    "Phase",
    "phase",
    "phase_at",
    "require_phase",
    "seconds_until_next_phase",
    # Pricing
    "elapsed",
    "decay_factor",
    "current_price",
    "check_purchase",
    "minimum_next_bid",
    "check_bid",
    "is_bid_valid",
    "sealed_bid_price",
    "quote",
    "status",
    "enrich",
    # Operations
    "ContractCall",
    "TransactionPlan",
    "CreateAuctionParams",
    "SnapshotCache",
    # Dispatch
    "AuctionService",
    "AscendingAuctionService",
    "DecayingAuctionService",
    "SealedBidAuctionService",
    "ServiceRegistry",
    "service_for",
]
