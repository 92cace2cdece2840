"""
Error taxonomy for the auction engine.

Two families:
- Programmer errors (UnknownProtocol, UnsupportedOperation): a dispatch case
  is missing or a capability was called on the wrong protocol. Logged loudly
  by the caller and never partially applied.
- User-facing rejections (BidRejected subclasses): carry the computed values
  (minimum bid, deadline, phase) so the UI can explain the refusal.

Decoding and mapping failures (MalformedIdentifier, InvalidSnapshotArity)
are typed so a batch caller can skip one bad entry and keep going.
"""

from typing import Any, Dict, Optional


class AuctionError(Exception):
    """Base class for all engine errors."""


# =============================================================================
# Decoding / Mapping
# =============================================================================


class MalformedIdentifier(AuctionError, ValueError):
    """Encoded auction id does not have the expected structure."""

    def __init__(self, code: Any, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"Malformed auction id {code!r}: {reason}")


class UnknownProtocol(AuctionError, LookupError):
    """Protocol tag outside the five supported auction protocols."""

    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(f"Unknown auction protocol: {tag!r}")


class InvalidSnapshotArity(AuctionError, ValueError):
    """Raw contract tuple has the wrong number of fields for its protocol."""

    def __init__(self, protocol: Any, expected: int, actual: int):
        self.protocol = protocol
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{protocol} auction record needs {expected} fields, got {actual}"
        )


class UnsupportedOperation(AuctionError):
    """Capability not offered by the protocol it was requested from."""

    def __init__(self, protocol: Any, operation: str, hint: str = ""):
        self.protocol = protocol
        self.operation = operation
        message = f"{protocol} auctions do not support {operation}"
        if hint:
            message = f"{message} - {hint}"
        super().__init__(message)


class StaleSnapshot(AuctionError):
    """Operation attempted against a snapshot older than the latest refresh."""

    def __init__(self, code: str, held: tuple, offered: tuple):
        self.code = code
        self.held = held
        self.offered = offered
        super().__init__(
            f"Snapshot for {code} is stale: revision {offered} < latest {held}"
        )


# =============================================================================
# User-facing rejections
# =============================================================================


class BidRejected(AuctionError):
    """A bid or purchase the UI must explain to the user."""

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "message": str(self)}


class BelowMinimumBid(BidRejected):
    def __init__(self, amount: int, minimum: int):
        self.amount = amount
        self.minimum = minimum
        super().__init__(f"Bid {amount} is below the minimum of {minimum}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(amount=str(self.amount), minimum=str(self.minimum))
        return data


class AuctionEnded(BidRejected):
    def __init__(self, deadline: int, now: Optional[int] = None):
        self.deadline = deadline
        self.now = now
        super().__init__(f"Auction ended at {deadline}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(deadline=self.deadline, now=self.now)
        return data


class AuctionAlreadyClaimed(BidRejected):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Auction {code} has already been claimed")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(auction=self.code)
        return data


class PhaseMismatch(BidRejected):
    """Sealed-bid commit or reveal attempted outside its window."""

    def __init__(self, expected: Any, actual: Any, boundary: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.boundary = boundary
        super().__init__(
            f"Not in {getattr(expected, 'name', expected)} phase "
            f"(current: {getattr(actual, 'name', actual)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            expected=getattr(self.expected, "name", str(self.expected)),
            actual=getattr(self.actual, "name", str(self.actual)),
            boundary=self.boundary,
        )
        return data


__all__ = [
    "AuctionError",
    "MalformedIdentifier",
    "UnknownProtocol",
    "InvalidSnapshotArity",
    "UnsupportedOperation",
    "StaleSnapshot",
    "BidRejected",
    "BelowMinimumBid",
    "AuctionEnded",
    "AuctionAlreadyClaimed",
    "PhaseMismatch",
]
