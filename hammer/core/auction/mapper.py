"""
Snapshot Mapper - raw contract records to AuctionSnapshot.

Each protocol contract returns its `auctions(id)` record as an ordered tuple.
The layouts below name every position; a record must match its layout
exactly or it is skipped.

A failed mapping returns None rather than a half-filled snapshot. Callers
treat None as "skip this entry", never as a zero-valued auction.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from hammer.core.auction.snapshot import (
    AuctionedAsset,
    AuctionSnapshot,
    Bid,
    BiddingAsset,
)
from hammer.core.errors import AuctionError, InvalidSnapshotArity
from hammer.core.identity import AuctionId
from hammer.core.protocol import AssetKind, AuctionProtocol
from hammer.crypto import to_checksum_address
from hammer.utils.logger import get_logger
from hammer.utils.validation import coerce_bool, coerce_uint, validate_string

logger = get_logger("mapper")

TokenNameResolver = Callable[[str], str]


# =============================================================================
# Record layouts
# =============================================================================

_COMMON_HEAD = (
    "id",
    "name",
    "description",
    "img_url",
    "auctioneer",
    "auction_type",
    "auctioned_token",
    "auctioned_token_id_or_amount",
    "bidding_token",
)

DECAYING_LAYOUT = _COMMON_HEAD + (
    "starting_price",
    "available_funds",
    "reserved_price",
    "winner",
    "deadline",
    "duration",
    "is_claimed",
)

ASCENDING_LAYOUT = _COMMON_HEAD + (
    "starting_bid",
    "available_funds",
    "min_bid_delta",
    "highest_bid",
    "winner",
    "deadline",
    "duration",
    "is_claimed",
)

SEALED_BID_LAYOUT = _COMMON_HEAD + (
    "starting_bid",
    "available_funds",
    "winning_bid",
    "winner",
    "bid_commit_end",
    "bid_reveal_end",
    "is_claimed",
)

LAYOUTS: Dict[AuctionProtocol, Tuple[str, ...]] = {
    AuctionProtocol.ASCENDING: ASCENDING_LAYOUT,
    AuctionProtocol.LINEAR: DECAYING_LAYOUT,
    AuctionProtocol.EXPONENTIAL: DECAYING_LAYOUT,
    AuctionProtocol.LOGARITHMIC: DECAYING_LAYOUT,
    AuctionProtocol.SEALED_BID: SEALED_BID_LAYOUT,
}

_TEXT_FIELDS = ("name", "description", "img_url")
_ADDRESS_FIELDS = ("auctioneer", "auctioned_token", "bidding_token", "winner")

BID_EVENT_LAYOUT = ("bidder", "amount", "timestamp")


# =============================================================================
# Helpers
# =============================================================================


def _resolve_symbol(resolver: Optional[TokenNameResolver], address: str) -> str:
    """Symbol lookup never fails the mapping; fall back to ''."""
    if resolver is None:
        return ""
    try:
        symbol = resolver(address)
    except Exception as e:  # resolver is an external collaborator
        logger.debug(f"Symbol lookup failed for {address}: {e}")
        return ""
    if not isinstance(symbol, str):
        return ""
    return symbol


def _fields(protocol: AuctionProtocol, raw_fields: Any) -> Dict[str, Any]:
    layout = LAYOUTS[protocol]
    if not isinstance(raw_fields, (list, tuple)):
        raise InvalidSnapshotArity(protocol, len(layout), 0)
    if len(raw_fields) != len(layout):
        raise InvalidSnapshotArity(protocol, len(layout), len(raw_fields))

    fields = dict(zip(layout, raw_fields))
    missing = [name for name, value in fields.items() if value is None]
    if missing:
        raise ValueError(f"missing required fields: {', '.join(missing)}")

    for name in _TEXT_FIELDS:
        valid, err = validate_string(fields[name], name)
        if not valid:
            raise ValueError(err)

    for name in _ADDRESS_FIELDS:
        fields[name] = to_checksum_address(fields[name])

    return fields


# =============================================================================
# Mapping
# =============================================================================


def map_raw_auction_strict(
    protocol: Any,
    raw_fields: Sequence[Any],
    token_name_resolver: Optional[TokenNameResolver] = None,
    *,
    fetched_at: int = 0,
    block_number: int = 0,
) -> AuctionSnapshot:
    """
    Map a raw contract record, raising on any problem.

    Raises:
        UnknownProtocol: protocol is not supported
        InvalidSnapshotArity: wrong number of fields for the protocol
        ValueError: missing field, bad type, or snapshot invariant violated
    """
    protocol = AuctionProtocol.parse(protocol)
    f = _fields(protocol, raw_fields)

    auction_id = AuctionId(protocol, coerce_uint(f["id"], "id"))
    auction_type = coerce_uint(f["auction_type"], "auction_type", max_val=255)
    if auction_type not in (AssetKind.NFT, AssetKind.FUNGIBLE):
        raise ValueError(f"unknown auction_type {auction_type}")

    auctioned = AuctionedAsset(
        token_address=f["auctioned_token"],
        id_or_amount=coerce_uint(f["auctioned_token_id_or_amount"], "auctioned_token_id_or_amount"),
        is_non_fungible=auction_type == AssetKind.NFT,
        symbol=_resolve_symbol(token_name_resolver, f["auctioned_token"]),
    )
    bidding = BiddingAsset(
        token_address=f["bidding_token"],
        symbol=_resolve_symbol(token_name_resolver, f["bidding_token"]),
    )

    common = dict(
        id=auction_id,
        auctioneer=f["auctioneer"],
        winner=f["winner"],
        auctioned_asset=auctioned,
        bidding_asset=bidding,
        available_funds=coerce_uint(f["available_funds"], "available_funds"),
        is_claimed=coerce_bool(f["is_claimed"], "is_claimed"),
        name=f["name"],
        description=f["description"],
        image_url=f["img_url"],
        fetched_at=fetched_at,
        block_number=block_number,
    )

    if protocol.is_decaying:
        return AuctionSnapshot(
            starting_price=coerce_uint(f["starting_price"], "starting_price"),
            reserved_price=coerce_uint(f["reserved_price"], "reserved_price"),
            deadline=coerce_uint(f["deadline"], "deadline"),
            duration=coerce_uint(f["duration"], "duration"),
            **common,
        )

    if protocol.is_ascending:
        return AuctionSnapshot(
            starting_price=coerce_uint(f["starting_bid"], "starting_bid"),
            reserved_price=0,
            current_highest_bid=coerce_uint(f["highest_bid"], "highest_bid"),
            min_bid_delta=coerce_uint(f["min_bid_delta"], "min_bid_delta"),
            deadline=coerce_uint(f["deadline"], "deadline"),
            duration=coerce_uint(f["duration"], "duration"),
            **common,
        )

    # Sealed bid: timing lives in the two phase boundaries
    reveal_end = coerce_uint(f["bid_reveal_end"], "bid_reveal_end")
    return AuctionSnapshot(
        starting_price=coerce_uint(f["starting_bid"], "starting_bid"),
        reserved_price=0,
        current_highest_bid=coerce_uint(f["winning_bid"], "winning_bid"),
        deadline=reveal_end,
        duration=0,
        commit_phase_end=coerce_uint(f["bid_commit_end"], "bid_commit_end"),
        reveal_phase_end=reveal_end,
        **common,
    )


def map_raw_auction(
    protocol: Any,
    raw_fields: Sequence[Any],
    token_name_resolver: Optional[TokenNameResolver] = None,
    *,
    fetched_at: int = 0,
    block_number: int = 0,
) -> Optional[AuctionSnapshot]:
    """
    Map a raw contract record into an AuctionSnapshot.

    Args:
        protocol: Protocol whose layout raw_fields follows
        raw_fields: Ordered contract-return values
        token_name_resolver: Optional address -> symbol lookup
        fetched_at: Wall-clock second of the read
        block_number: Block of the read

    Returns:
        The snapshot, or None if the record is unusable

    Raises:
        UnknownProtocol: protocol is not supported (a caller bug, not a bad record)
    """
    protocol = AuctionProtocol.parse(protocol)
    try:
        return map_raw_auction_strict(
            protocol,
            raw_fields,
            token_name_resolver,
            fetched_at=fetched_at,
            block_number=block_number,
        )
    except (AuctionError, ValueError) as e:
        logger.warning(f"Skipping {protocol} auction record: {e}")
        return None


def map_auction_batch(
    protocol: Any,
    rows: Iterable[Optional[Sequence[Any]]],
    token_name_resolver: Optional[TokenNameResolver] = None,
    *,
    fetched_at: int = 0,
    block_number: int = 0,
    newest_first: bool = True,
) -> List[AuctionSnapshot]:
    """
    Map a batch of records (e.g. the last N auctions of a contract).

    Rows that are None (failed reads) or fail mapping are skipped; one bad
    record never aborts the batch.
    """
    protocol = AuctionProtocol.parse(protocol)
    snapshots = []
    skipped = 0
    for row in rows:
        snapshot = None
        if row is not None:
            snapshot = map_raw_auction(
                protocol,
                row,
                token_name_resolver,
                fetched_at=fetched_at,
                block_number=block_number,
            )
        if snapshot is None:
            skipped += 1
            continue
        snapshots.append(snapshot)

    if skipped:
        logger.info(f"Mapped {len(snapshots)} {protocol} auctions, skipped {skipped}")

    if newest_first:
        snapshots.sort(key=lambda s: s.id.numeric_id, reverse=True)
    return snapshots


def listing_window(counter: int, n: int) -> range:
    """
    On-chain ids of the last n auctions given the contract's auction counter.

    Ids run from 0 to counter - 1.
    """
    if counter <= 0 or n <= 0:
        return range(0)
    return range(max(counter - n, 0), counter)


# =============================================================================
# Bid events
# =============================================================================


def parse_bid_event(auction_id: AuctionId, fields: Sequence[Any]) -> Optional[Bid]:
    """
    Map a raw `(bidder, amount, timestamp)` bid log into a Bid.

    Returns None on arity or type mismatch.
    """
    if not isinstance(fields, (list, tuple)) or len(fields) != len(BID_EVENT_LAYOUT):
        logger.warning(f"Skipping bid event for {auction_id}: bad arity")
        return None
    bidder, amount, timestamp = fields
    try:
        return Bid(
            auction_id=auction_id,
            bidder=to_checksum_address(bidder),
            amount=coerce_uint(amount, "amount"),
            timestamp=coerce_uint(timestamp, "timestamp"),
        )
    except ValueError as e:
        logger.warning(f"Skipping bid event for {auction_id}: {e}")
        return None


def bid_history(auction_id: AuctionId, events: Iterable[Sequence[Any]]) -> List[Bid]:
    """Parsed bids ordered oldest first; unusable events are dropped."""
    bids = [b for b in (parse_bid_event(auction_id, e) for e in events) if b is not None]
    bids.sort(key=lambda b: (b.timestamp, b.amount))
    return bids


__all__ = [
    "map_raw_auction",
    "map_raw_auction_strict",
    "map_auction_batch",
    "listing_window",
    "parse_bid_event",
    "bid_history",
    "LAYOUTS",
    "DECAYING_LAYOUT",
    "ASCENDING_LAYOUT",
    "SEALED_BID_LAYOUT",
    "TokenNameResolver",
]
