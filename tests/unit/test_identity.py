"""
Unit tests for the auction identity codec.

Tests cover:
1. Encoding format
2. Decoding and the (protocol, id) bijection
3. Rejection of malformed and non-canonical codes
4. Protocol tag parsing
"""

import base64

import pytest

from hammer.core.errors import MalformedIdentifier, UnknownProtocol
from hammer.core.identity import AuctionId, decode, encode
from hammer.core.protocol import AuctionProtocol
from hammer.crypto import UINT256_MAX


# =============================================================================
# Encoding
# =============================================================================


class TestEncode:
    """Tests for encode()."""

    def test_known_code(self):
        """Code is unpadded base64url of '<tag>:<id>'."""
        assert encode(AuctionProtocol.LINEAR, 7) == "TGluZWFyOjc"
        assert encode(AuctionProtocol.SEALED_BID, 42) == "Vmlja3JleTo0Mg"
        assert encode(AuctionProtocol.ASCENDING, 0) == "RW5nbGlzaDow"

    def test_accepts_tag_string(self):
        assert encode("Exponential", 1) == "RXhwb25lbnRpYWw6MQ"

    def test_code_is_url_safe(self):
        for protocol in AuctionProtocol:
            code = encode(protocol, UINT256_MAX)
            assert "=" not in code
            assert "+" not in code and "/" not in code

    def test_unknown_protocol(self):
        with pytest.raises(UnknownProtocol):
            encode("Dutch", 1)

    @pytest.mark.parametrize("bad_id", [-1, UINT256_MAX + 1, 1.0, "1", True])
    def test_rejects_bad_numeric_id(self, bad_id):
        with pytest.raises(ValueError):
            encode(AuctionProtocol.LINEAR, bad_id)


# =============================================================================
# Decoding
# =============================================================================


class TestDecode:
    """Tests for decode()."""

    def test_known_code(self):
        auction_id = decode("TGluZWFyOjc")
        assert auction_id == AuctionId(AuctionProtocol.LINEAR, 7)

    @pytest.mark.parametrize("protocol", list(AuctionProtocol))
    @pytest.mark.parametrize("numeric_id", [0, 1, 2**64, UINT256_MAX])
    def test_inverse_of_encode(self, protocol, numeric_id):
        decoded = decode(encode(protocol, numeric_id))
        assert decoded.protocol is protocol
        assert decoded.numeric_id == numeric_id

    def test_distinct_pairs_get_distinct_codes(self):
        codes = {encode(p, i) for p in AuctionProtocol for i in range(20)}
        assert len(codes) == len(AuctionProtocol) * 20

    def test_auction_id_helpers(self):
        auction_id = AuctionId(AuctionProtocol.LOGARITHMIC, 3)
        assert auction_id.code == "TG9nYXJpdGhtaWM6Mw"
        assert str(auction_id) == auction_id.code
        assert AuctionId.from_code(auction_id.code) == auction_id


class TestMalformed:
    """Codes that must be refused."""

    @pytest.mark.parametrize("code", [
        "",                      # empty
        "TGluZWFyOjc=",          # padded
        "TGluZWFy+jc",           # standard alphabet
        "TGlu ZWFyOjc",          # whitespace
        "TGluZWFyNw",            # "Linear7", no separator
        "TGluZWFyOi0x",          # "Linear:-1"
        "TGluZWFyOjAwNw",        # "Linear:007", leading zeros
        "TGluZWFyOjd",           # same bytes as "TGluZWFyOjc", non-canonical tail
        "A" * 200,               # too long
    ])
    def test_malformed(self, code):
        with pytest.raises(MalformedIdentifier):
            decode(code)

    @pytest.mark.parametrize("code", [None, 7, b"TGluZWFyOjc"])
    def test_non_string(self, code):
        with pytest.raises(MalformedIdentifier):
            decode(code)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            decode("!!")

    def test_unknown_tag(self):
        with pytest.raises(UnknownProtocol):
            decode("RHV0Y2g6MQ")  # "Dutch:1"

    def test_tag_is_case_sensitive(self):
        with pytest.raises(UnknownProtocol):
            decode("bGluZWFyOjc")  # "linear:7"

    def test_id_above_uint256(self):
        code = encode(AuctionProtocol.LINEAR, UINT256_MAX)
        # Same tag, one more than the largest id
        raw = f"Linear:{UINT256_MAX + 1}".encode("ascii")
        too_big = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
        assert decode(code).numeric_id == UINT256_MAX
        with pytest.raises(MalformedIdentifier):
            decode(too_big)


# =============================================================================
# Protocol tags
# =============================================================================


class TestProtocolParse:
    """Tests for AuctionProtocol.parse()."""

    def test_tags_are_fixed(self):
        assert [p.tag for p in AuctionProtocol] == [
            "English", "Linear", "Exponential", "Logarithmic", "Vickrey",
        ]

    @pytest.mark.parametrize("value", ["Linear", "linear", "LINEAR", " Linear "])
    def test_parse_variants(self, value):
        assert AuctionProtocol.parse(value) is AuctionProtocol.LINEAR

    def test_parse_member_name(self):
        assert AuctionProtocol.parse("sealed_bid") is AuctionProtocol.SEALED_BID

    @pytest.mark.parametrize("value", ["Dutch", "", None, 3])
    def test_parse_unknown(self, value):
        with pytest.raises(UnknownProtocol):
            AuctionProtocol.parse(value)

    def test_families(self):
        decaying = {p for p in AuctionProtocol if p.is_decaying}
        assert decaying == {
            AuctionProtocol.LINEAR,
            AuctionProtocol.EXPONENTIAL,
            AuctionProtocol.LOGARITHMIC,
        }
        assert AuctionProtocol.ASCENDING.is_ascending
        assert AuctionProtocol.SEALED_BID.is_sealed_bid
