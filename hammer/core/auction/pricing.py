"""
Pricing Engine - what an auction can be transacted at, right now.

Decaying-price (reverse Dutch) auctions:
    price(e), e = clamp(now - (deadline - duration), 0, duration)

    Linear:       start - (start - reserve) * e / d
    Exponential:  start * (reserve / start) ** (e / d)
    Logarithmic:  start - (start - reserve) * ln(1 + e) / ln(1 + d)

    Every curve satisfies price(0) = start, price(d) = reserve, is
    non-increasing in e, and never leaves [reserve, start]. Prices are
    integers in base units; the transcendental curves are evaluated in
    Decimal at PRECISION digits and floored, never in binary floating point.

Ascending (English) auctions:
    minimum next bid = highest bid + min delta, or the starting bid.

Sealed-bid (Vickrey) auctions:
    no price is reported before the reveal window closes.
"""

from decimal import Decimal, localcontext
from typing import Callable, Dict, Optional

from hammer.core.auction.phase import Phase, phase
from hammer.core.auction.snapshot import AuctionSnapshot, AuctionStatus, EnrichedSnapshot
from hammer.core.errors import (
    AuctionAlreadyClaimed,
    AuctionEnded,
    BelowMinimumBid,
    BidRejected,
    UnsupportedOperation,
)
from hammer.core.protocol import AuctionProtocol
from hammer.utils.logger import get_logger
from hammer.utils.validation import validate_amount

logger = get_logger("pricing")


# =============================================================================
# Constants
# =============================================================================

# Decimal digits used for exp/ln. uint256 values have at most 78 digits.
PRECISION = 100


# =============================================================================
# Decay curves
# =============================================================================


def elapsed(snapshot: AuctionSnapshot, now: int) -> int:
    """Seconds since the auction started, clamped to [0, duration]."""
    return min(max(now - snapshot.start_time, 0), snapshot.duration)


def _linear(start: int, reserve: int, e: int, d: int) -> int:
    return start - (start - reserve) * e // d


def _exponential(start: int, reserve: int, e: int, d: int) -> int:
    # A multiplicative curve cannot reach 0, so a zero reserve decays
    # toward one base unit; the endpoint itself is pinned by the caller.
    floor = max(reserve, 1)
    if start <= floor:
        return start
    with localcontext() as ctx:
        ctx.prec = PRECISION
        ratio = Decimal(floor) / Decimal(start)
        value = Decimal(start) * (ratio.ln() * e / d).exp()
    return int(value)


def _logarithmic(start: int, reserve: int, e: int, d: int) -> int:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        drop = Decimal(start - reserve) * Decimal(1 + e).ln() / Decimal(1 + d).ln()
    return start - int(drop)


DECAY_CURVES: Dict[AuctionProtocol, Callable[[int, int, int, int], int]] = {
    AuctionProtocol.LINEAR: _linear,
    AuctionProtocol.EXPONENTIAL: _exponential,
    AuctionProtocol.LOGARITHMIC: _logarithmic,
}


def decay_factor(snapshot: AuctionSnapshot) -> Decimal:
    """
    Per-second multiplicative factor of an exponential auction.

    Derived from the two boundary conditions: factor ** duration equals
    reserve / start. Returns 1 when there is nothing to decay.
    """
    if snapshot.protocol is not AuctionProtocol.EXPONENTIAL:
        raise UnsupportedOperation(snapshot.protocol, "decay_factor")
    start = snapshot.starting_price
    floor = max(snapshot.reserved_price, 1)
    if snapshot.duration == 0 or start <= floor:
        return Decimal(1)
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return ((Decimal(floor) / Decimal(start)).ln() / snapshot.duration).exp()


def current_price(snapshot: AuctionSnapshot, now: int) -> int:
    """
    Price a decaying-price auction can be bought at, at time `now`.

    Claimed auctions are terminal and report the reserve price. A zero
    duration auction is at its floor immediately.

    Raises:
        UnsupportedOperation: snapshot is not a decaying-price auction
    """
    protocol = snapshot.protocol
    if not protocol.is_decaying:
        raise UnsupportedOperation(protocol, "current_price")

    start = snapshot.starting_price
    reserve = snapshot.reserved_price
    d = snapshot.duration

    if snapshot.is_claimed or d == 0:
        return reserve

    e = elapsed(snapshot, now)
    if e == 0:
        return start
    if e >= d:
        return reserve

    price = DECAY_CURVES[protocol](start, reserve, e, d)
    price = min(max(price, reserve), start)

    logger.debug(f"{snapshot.code} {protocol.tag} price at +{e}s/{d}s = {price}")
    return price


def check_purchase(snapshot: AuctionSnapshot, now: int) -> None:
    """
    Refuse a direct purchase of a decaying-price auction that is over.

    Raises:
        UnsupportedOperation: snapshot is not a decaying-price auction
        AuctionAlreadyClaimed: already sold
        AuctionEnded: deadline passed unsold
    """
    if not snapshot.protocol.is_decaying:
        raise UnsupportedOperation(snapshot.protocol, "direct purchase")
    if snapshot.is_claimed:
        raise AuctionAlreadyClaimed(snapshot.code)
    if now >= snapshot.deadline:
        raise AuctionEnded(snapshot.deadline, now)


# =============================================================================
# Ascending bids
# =============================================================================


def minimum_next_bid(snapshot: AuctionSnapshot) -> int:
    """
    Smallest acceptable next bid on an ascending auction.

    0 means no floor is configured; callers must not treat it as a valid
    bid amount.
    """
    if not snapshot.protocol.is_ascending:
        raise UnsupportedOperation(snapshot.protocol, "minimum_next_bid")
    if snapshot.current_highest_bid > 0:
        return snapshot.current_highest_bid + snapshot.min_bid_delta
    return snapshot.starting_price


def check_bid(snapshot: AuctionSnapshot, amount: int, now: int) -> None:
    """
    Validate a bid on an ascending auction.

    Raises:
        UnsupportedOperation: snapshot is not an ascending auction
        ValueError: amount is not a uint256
        AuctionAlreadyClaimed: auction is settled
        AuctionEnded: deadline passed
        BelowMinimumBid: amount under the computed minimum
    """
    minimum = minimum_next_bid(snapshot)
    valid, err = validate_amount(amount)
    if not valid:
        raise ValueError(err)

    if snapshot.is_claimed:
        raise AuctionAlreadyClaimed(snapshot.code)
    if now >= snapshot.deadline:
        raise AuctionEnded(snapshot.deadline, now)
    if amount < max(minimum, 1):
        raise BelowMinimumBid(amount, max(minimum, 1))


def is_bid_valid(snapshot: AuctionSnapshot, amount: int, now: int) -> bool:
    """Boolean form of check_bid()."""
    try:
        check_bid(snapshot, amount, now)
    except (BidRejected, ValueError):
        return False
    return True


# =============================================================================
# Sealed bids
# =============================================================================


def sealed_bid_price(snapshot: AuctionSnapshot, now: int) -> Optional[int]:
    """Winning bid once the reveal window has closed, otherwise None."""
    if phase(snapshot, now) != Phase.ENDED:
        return None
    return snapshot.current_highest_bid or None


# =============================================================================
# Dispatch by family
# =============================================================================


def quote(snapshot: AuctionSnapshot, now: int) -> Optional[int]:
    """
    The one number the UI shows as "price":
    - decaying: current price
    - ascending: minimum next bid (None when unset)
    - sealed bid: winning bid after reveal, None before
    """
    protocol = snapshot.protocol
    if protocol.is_decaying:
        return current_price(snapshot, now)
    if protocol.is_ascending:
        return minimum_next_bid(snapshot) or None
    return sealed_bid_price(snapshot, now)


def status(snapshot: AuctionSnapshot, now: int) -> AuctionStatus:
    """Display status used by auction listings."""
    if snapshot.is_claimed:
        return AuctionStatus.CLAIMED
    if snapshot.protocol.is_sealed_bid:
        return AuctionStatus.ENDED if phase(snapshot, now) == Phase.ENDED else AuctionStatus.ACTIVE
    if now < snapshot.start_time:
        return AuctionStatus.UPCOMING
    if now >= snapshot.deadline:
        return AuctionStatus.ENDED
    return AuctionStatus.ACTIVE


def enrich(snapshot: AuctionSnapshot, now: int) -> EnrichedSnapshot:
    """Compute every derived value of a snapshot at `now` in one step."""
    protocol = snapshot.protocol
    price = None
    minimum = None
    current_phase = None

    if protocol.is_decaying:
        price = current_price(snapshot, now)
    elif protocol.is_ascending:
        minimum = minimum_next_bid(snapshot)
        price = snapshot.current_highest_bid or None
    else:
        current_phase = phase(snapshot, now)
        price = sealed_bid_price(snapshot, now)

    return EnrichedSnapshot(
        snapshot=snapshot,
        as_of=now,
        status=status(snapshot, now),
        current_price=price,
        minimum_next_bid=minimum,
        phase=current_phase,
    )


__all__ = [
    "PRECISION",
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
]
