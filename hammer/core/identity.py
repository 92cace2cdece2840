"""
Auction identity codec.

Collaborators outside the engine only ever see one opaque string per auction.
It packs the protocol tag and the on-chain numeric id:

    code = base64url("<tag>:<decimal id>")   (no padding)

The string is URL safe (it is used as the routing key of the auction page)
and decode() accepts only the exact string encode() produces, so the pair
(protocol, id) <-> code is a bijection.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Union

from hammer.core.protocol import AuctionProtocol
from hammer.core.errors import MalformedIdentifier, UnknownProtocol
from hammer.crypto import UINT256_MAX

SEPARATOR = ":"

# Longest possible code: tag + ":" + 78 decimal digits, base64 grows by 4/3
MAX_CODE_LENGTH = 128

_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_DECIMAL_RE = re.compile(r"^(0|[1-9][0-9]*)$")


@dataclass(frozen=True)
class AuctionId:
    """(protocol, on-chain numeric id) pair."""
    protocol: AuctionProtocol
    numeric_id: int

    @property
    def code(self) -> str:
        return encode(self.protocol, self.numeric_id)

    @classmethod
    def from_code(cls, code: str) -> "AuctionId":
        return decode(code)

    def __str__(self) -> str:
        return self.code


def _check_numeric_id(numeric_id: Any) -> int:
    if isinstance(numeric_id, bool) or not isinstance(numeric_id, int):
        raise ValueError(f"numeric_id must be int, got {type(numeric_id).__name__}")
    if numeric_id < 0 or numeric_id > UINT256_MAX:
        raise ValueError(f"numeric_id out of uint256 range: {numeric_id}")
    return numeric_id


def encode(protocol: Union[AuctionProtocol, str], numeric_id: int) -> str:
    """
    Encode a protocol and on-chain id into an opaque auction code.

    Raises:
        UnknownProtocol: if protocol is not one of the supported tags
        ValueError: if numeric_id is not a uint256
    """
    protocol = AuctionProtocol.parse(protocol)
    numeric_id = _check_numeric_id(numeric_id)
    raw = f"{protocol.tag}{SEPARATOR}{numeric_id}".encode("ascii")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode(code: Any) -> AuctionId:
    """
    Decode an auction code back into its (protocol, numeric id) pair.

    Raises:
        MalformedIdentifier: if the code does not have the expected structure
        UnknownProtocol: if the embedded tag is not a supported protocol
    """
    if not isinstance(code, str):
        raise MalformedIdentifier(code, "code must be a string")
    if not code or len(code) > MAX_CODE_LENGTH:
        raise MalformedIdentifier(code, "bad length")
    if not _CODE_RE.match(code):
        raise MalformedIdentifier(code, "illegal characters")

    padded = code + "=" * (-len(code) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded).decode("ascii")
    except (binascii.Error, ValueError) as e:
        raise MalformedIdentifier(code, f"not valid base64: {e}") from e

    tag, sep, digits = raw.partition(SEPARATOR)
    if not sep or not tag:
        raise MalformedIdentifier(code, "missing protocol separator")
    if not _DECIMAL_RE.match(digits):
        raise MalformedIdentifier(code, "id is not a canonical decimal")

    numeric_id = int(digits)
    if numeric_id > UINT256_MAX:
        raise MalformedIdentifier(code, "id exceeds uint256")

    # Only the exact tag spelling is accepted here; parse() would also
    # accept member names and other casings.
    protocol = next((p for p in AuctionProtocol if p.tag == tag), None)
    if protocol is None:
        raise UnknownProtocol(tag)

    if encode(protocol, numeric_id) != code:
        raise MalformedIdentifier(code, "non-canonical encoding")

    return AuctionId(protocol, numeric_id)


__all__ = ["AuctionId", "encode", "decode", "SEPARATOR"]
