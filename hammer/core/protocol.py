"""
Auction protocol tags.

The marketplace runs one contract per protocol. The tag string is what the
frontend stores and embeds in encoded auction ids, so it must never change.
"""

from enum import Enum, IntEnum
from typing import Any

from hammer.core.errors import UnknownProtocol


class AuctionProtocol(str, Enum):
    """Closed set of supported auction protocols."""
    ASCENDING = "English"
    LINEAR = "Linear"
    EXPONENTIAL = "Exponential"
    LOGARITHMIC = "Logarithmic"
    SEALED_BID = "Vickrey"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def is_decaying(self) -> bool:
        return self in DECAYING_PROTOCOLS

    @property
    def is_ascending(self) -> bool:
        return self is AuctionProtocol.ASCENDING

    @property
    def is_sealed_bid(self) -> bool:
        return self is AuctionProtocol.SEALED_BID

    @classmethod
    def parse(cls, value: Any) -> "AuctionProtocol":
        """
        Resolve a protocol from a member, its tag ("Linear") or its name
        ("LINEAR"), case-insensitively.

        Raises:
            UnknownProtocol: for anything else
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value.lower(), member.name.lower()):
                    return member
        raise UnknownProtocol(value)

    def __str__(self) -> str:
        return self.value


DECAYING_PROTOCOLS = frozenset({
    AuctionProtocol.LINEAR,
    AuctionProtocol.EXPONENTIAL,
    AuctionProtocol.LOGARITHMIC,
})


class AssetKind(IntEnum):
    """Contract `auctionType` byte: what is being auctioned."""
    NFT = 0        # ERC-721, idOrAmount is a token id
    FUNGIBLE = 1   # ERC-20, idOrAmount is an amount


__all__ = ["AuctionProtocol", "AssetKind", "DECAYING_PROTOCOLS"]
