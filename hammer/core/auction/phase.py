"""
Phase Resolver - lifecycle of a sealed-bid (commit-reveal) auction.

    COMMIT  ->  REVEAL  ->  ENDED
      now < commit_end      commit_end <= now < reveal_end      now >= reveal_end

The phase is a pure function of (snapshot, now) and is never stored, so a
cached phase can never disagree with the clock. An instant exactly on a
boundary belongs to the later phase.
"""

from enum import IntEnum
from typing import Optional

from hammer.core.auction.snapshot import AuctionSnapshot
from hammer.core.errors import AuctionEnded, PhaseMismatch, UnsupportedOperation


class Phase(IntEnum):
    """Phase of a sealed-bid auction."""
    COMMIT = 0   # Accepting sealed commitments
    REVEAL = 1   # Accepting reveals of committed bids
    ENDED = 2    # Terminal, winner known on-chain


def phase_at(commit_phase_end: int, reveal_phase_end: int, now: int) -> Phase:
    """Phase for raw boundaries, all in whole seconds."""
    if now < commit_phase_end:
        return Phase.COMMIT
    if now < reveal_phase_end:
        return Phase.REVEAL
    return Phase.ENDED


def _require_sealed(snapshot: AuctionSnapshot) -> None:
    if not snapshot.protocol.is_sealed_bid:
        raise UnsupportedOperation(snapshot.protocol, "commit/reveal phases")


def phase(snapshot: AuctionSnapshot, now: int) -> Phase:
    """
    Current phase of a sealed-bid auction.

    Raises:
        UnsupportedOperation: snapshot is not a sealed-bid auction
    """
    _require_sealed(snapshot)
    return phase_at(snapshot.commit_phase_end, snapshot.reveal_phase_end, now)


def require_phase(snapshot: AuctionSnapshot, now: int, expected: Phase) -> None:
    """
    Oracle for the submission layer: refuse a commit or reveal outside its window.

    Raises:
        AuctionEnded: auction is past its reveal window
        PhaseMismatch: auction is in a different, still open, phase
    """
    current = phase(snapshot, now)
    if current == expected:
        return
    if current == Phase.ENDED:
        raise AuctionEnded(snapshot.reveal_phase_end, now)
    boundary = snapshot.commit_phase_end if current == Phase.COMMIT else snapshot.reveal_phase_end
    raise PhaseMismatch(expected, current, boundary)


def seconds_until_next_phase(snapshot: AuctionSnapshot, now: int) -> Optional[int]:
    """Seconds until the next phase starts, None once ended."""
    current = phase(snapshot, now)
    if current == Phase.COMMIT:
        return snapshot.commit_phase_end - now
    if current == Phase.REVEAL:
        return snapshot.reveal_phase_end - now
    return None


__all__ = ["Phase", "phase", "phase_at", "require_phase", "seconds_until_next_phase"]
