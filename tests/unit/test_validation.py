"""
Unit tests for input validation and error payloads.
"""

import pytest

from hammer.core.errors import (
    AuctionAlreadyClaimed,
    AuctionEnded,
    AuctionError,
    BelowMinimumBid,
    BidRejected,
    InvalidSnapshotArity,
    MalformedIdentifier,
    UnknownProtocol,
    UnsupportedOperation,
)
from hammer.crypto import UINT256_MAX
from hammer.utils.validation import (
    coerce_bool,
    coerce_uint,
    validate_address,
    validate_amount,
    validate_integer,
    validate_string,
    validate_timestamp,
)


class TestValidators:
    """(is_valid, error) validators."""

    def test_integer(self):
        assert validate_integer(5, "x", 0, 10) == (True, "")
        assert not validate_integer(11, "x", 0, 10)[0]
        assert not validate_integer(-1, "x", 0, 10)[0]
        assert not validate_integer(True, "x")[0]
        assert not validate_integer(5.0, "x")[0]

    def test_amount(self):
        assert validate_amount(UINT256_MAX)[0]
        assert not validate_amount(UINT256_MAX + 1)[0]
        valid, err = validate_amount(-5, "starting_price")
        assert not valid
        assert "starting_price" in err

    def test_timestamp(self):
        assert validate_timestamp(2**64 - 1)[0]
        assert not validate_timestamp(2**64)[0]

    def test_address(self):
        assert validate_address("0x" + "ab" * 20)[0]
        assert not validate_address("0xab")[0]
        assert not validate_address(123)[0]

    def test_string(self):
        assert validate_string("lot", "name")[0]
        assert not validate_string("x" * 5000, "name")[0]
        assert not validate_string(None, "name")[0]
        assert not validate_string("abc", "name", pattern=r"^\d+$")[0]


class TestCoercion:
    """Contract return values to Python types."""

    @pytest.mark.parametrize("value, expected", [
        (7, 7),
        ("7", 7),
        ("0x10", 16),
        (" 42 ", 42),
        ("0", 0),
    ])
    def test_coerce_uint(self, value, expected):
        assert coerce_uint(value, "v") == expected

    @pytest.mark.parametrize("value", [7.0, "7.5", "-1", "007", "", None, True, -3, UINT256_MAX + 1])
    def test_coerce_uint_rejects(self, value):
        with pytest.raises(ValueError):
            coerce_uint(value, "v")

    def test_coerce_uint_bound(self):
        assert coerce_uint(255, "b", max_val=255) == 255
        with pytest.raises(ValueError):
            coerce_uint(256, "b", max_val=255)

    def test_coerce_bool(self):
        assert coerce_bool(True, "b") is True
        assert coerce_bool(0, "b") is False
        assert coerce_bool(1, "b") is True
        with pytest.raises(ValueError):
            coerce_bool(2, "b")
        with pytest.raises(ValueError):
            coerce_bool("true", "b")


class TestErrors:
    """Error hierarchy and UI payloads."""

    def test_hierarchy(self):
        assert issubclass(MalformedIdentifier, ValueError)
        assert issubclass(InvalidSnapshotArity, ValueError)
        assert issubclass(UnknownProtocol, LookupError)
        for cls in (MalformedIdentifier, UnknownProtocol, UnsupportedOperation, BidRejected):
            assert issubclass(cls, AuctionError)
        for cls in (BelowMinimumBid, AuctionEnded, AuctionAlreadyClaimed):
            assert issubclass(cls, BidRejected)

    def test_payloads(self):
        below = BelowMinimumBid(10**30, 10**30 + 1).to_dict()
        assert below["error"] == "BelowMinimumBid"
        assert below["minimum"] == str(10**30 + 1)

        ended = AuctionEnded(2000, now=2500).to_dict()
        assert (ended["deadline"], ended["now"]) == (2000, 2500)

        claimed = AuctionAlreadyClaimed("TGluZWFyOjc").to_dict()
        assert claimed["auction"] == "TGluZWFyOjc"

    def test_unsupported_message(self):
        error = UnsupportedOperation("Linear", "placeBid", "buy instead")
        assert "placeBid" in str(error)
        assert "buy instead" in str(error)
