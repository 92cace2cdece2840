"""
Cryptographic helpers for Hammer.

This module provides:
- Keccak-256 hashing (EVM compatible)
- EIP-55 checksum address normalization
- Sealed-bid commitments (keccak of amount and salt, as the contract checks)

Design Notes:
-------------
Addresses coming back from contract reads may be lower-case, upper-case or
checksummed depending on the client. We normalize every address to EIP-55 so
that equality checks (auctioneer, winner, bidder) never depend on the case
the RPC layer happened to use. A mixed-case address whose checksum does not
verify is rejected rather than silently re-cased.
"""

import secrets
from typing import Any

import eth_utils
from eth_abi.packed import encode_packed


# =============================================================================
# Constants
# =============================================================================

ZERO_ADDRESS = "0x" + "00" * 20

UINT256_MAX = 2**256 - 1


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: sealed-bid commitments.
    """
    return eth_utils.keccak(data)


# =============================================================================
# Addresses
# =============================================================================


def is_address(value: Any) -> bool:
    """True for a 0x-prefixed, 20-byte hex string with a valid (or no) checksum."""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        return False
    return eth_utils.is_address(value)


def to_checksum_address(value: str) -> str:
    """
    Convert an address to its EIP-55 mixed-case checksum form.

    Raises:
        ValueError: if value is not a 20-byte hex address
    """
    if not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return eth_utils.to_checksum_address(value)


def is_zero_address(value: str) -> bool:
    return is_address(value) and eth_utils.to_canonical_address(value) == bytes(20)


# =============================================================================
# Sealed-bid commitments
# =============================================================================


def generate_salt() -> bytes:
    """Random 32-byte blinding factor for a sealed bid."""
    return secrets.token_bytes(32)


def create_bid_commitment(amount: int, salt: bytes) -> bytes:
    """
    Create the commitment for a sealed bid.

    C = keccak256(abi.encodePacked(uint256 amount, bytes32 salt)), the
    value the commit-reveal contract recomputes at reveal time.

    Args:
        amount: Bid amount in base units
        salt: 32-byte blinding factor

    Returns:
        32-byte commitment
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"amount must be int, got {type(amount).__name__}")
    if amount < 0 or amount > UINT256_MAX:
        raise ValueError(f"amount out of uint256 range: {amount}")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != 32:
        raise ValueError("salt must be 32 bytes")

    return keccak256(encode_packed(["uint256", "bytes32"], [amount, bytes(salt)]))


__all__ = [
    "ZERO_ADDRESS",
    "UINT256_MAX",
    "keccak256",
    "is_address",
    "is_zero_address",
    "to_checksum_address",
    "generate_salt",
    "create_bid_commitment",
]
