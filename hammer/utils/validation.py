"""
Input Validation - sanitization of values read from contracts or typed by users.

Provides validation for all external inputs to prevent:
- Floating point creeping into 18-decimal token amounts
- Values outside the uint256 range the contracts use
- Malformed addresses
- Oversized strings in auction metadata
"""

import re
from typing import Any, Optional, Tuple

from hammer.crypto import UINT256_MAX, is_address

# =============================================================================
# Constants
# =============================================================================

MAX_STRING_LENGTH = 4096

MIN_AMOUNT = 0
MAX_AMOUNT = UINT256_MAX

# Seconds since epoch, contract block timestamps are uint256 but never
# realistically exceed 64 bits.
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1

_DECIMAL_RE = re.compile(r"^(0|[1-9][0-9]*)$")
_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a token amount (uint256)."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_timestamp(value: Any, name: str = "timestamp") -> Tuple[bool, str]:
    """Validate a timestamp in whole seconds."""
    return validate_integer(value, name, MIN_TIMESTAMP, MAX_TIMESTAMP)


def validate_address(value: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 0x-prefixed 20-byte hex address."""
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"
    if not is_address(value):
        return False, f"{name} is not a valid address: {value!r}"
    return True, ""


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_STRING_LENGTH,
    pattern: Optional[str] = None,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        pattern: Optional regex pattern

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    if pattern and not re.match(pattern, value):
        return False, f"{name} does not match required pattern"

    return True, ""


# =============================================================================
# Coercion
# =============================================================================


def coerce_uint(value: Any, name: str, max_val: int = MAX_AMOUNT) -> int:
    """
    Coerce a contract-return value to a non-negative int.

    Accepts ints, canonical decimal strings and 0x-hex strings (JSON-RPC
    clients return either). Floats are always rejected.

    Raises:
        ValueError: on any other type or an out-of-range value
    """
    if isinstance(value, str):
        text = value.strip()
        if _DECIMAL_RE.match(text):
            value = int(text)
        elif _HEX_RE.match(text):
            value = int(text, 16)
        else:
            raise ValueError(f"{name} is not an integer string: {value!r}")

    valid, err = validate_integer(value, name, 0, max_val)
    if not valid:
        raise ValueError(err)
    return value


def coerce_bool(value: Any, name: str) -> bool:
    """Coerce a contract bool (True/False or 0/1)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"{name} must be bool, got {value!r}")


__all__ = [
    "validate_integer",
    "validate_amount",
    "validate_timestamp",
    "validate_address",
    "validate_string",
    "coerce_uint",
    "coerce_bool",
    "MAX_STRING_LENGTH",
    "MAX_AMOUNT",
    "MAX_TIMESTAMP",
]
