"""
Transaction plans handed to the (external) submission layer.

A plan is an ordered list of contract calls: token approvals first, then the
auction call itself. Nothing here signs or sends anything.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from hammer.core.protocol import AssetKind, AuctionProtocol
from hammer.crypto import ZERO_ADDRESS
from hammer.utils.validation import (
    validate_address,
    validate_amount,
    validate_integer,
    validate_string,
)

# Function names on the auction contracts and the token standards
FN_APPROVE = "approve"
FN_CREATE_AUCTION = "createAuction"
FN_PLACE_BID = "placeBid"
FN_WITHDRAW_ITEM = "withdrawItem"
FN_WITHDRAW_FUNDS = "withdrawFunds"
FN_COMMIT_BID = "commitBid"
FN_REVEAL_BID = "revealBid"


@dataclass(frozen=True)
class ContractCall:
    """One contract invocation."""
    to: str
    function: str
    args: Tuple[Any, ...] = ()
    value: int = 0       # Native currency attached to the call
    standard: str = ""   # "erc20"/"erc721" for token calls, "" for auction calls

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "function": self.function,
            "args": [_jsonable(a) for a in self.args],
            "value": str(self.value),
            "standard": self.standard,
        }


@dataclass(frozen=True)
class TransactionPlan:
    """Validated call bundle for one user action on one auction."""
    auction_code: str
    action: str
    calls: Tuple[ContractCall, ...]

    @property
    def total_value(self) -> int:
        return sum(c.value for c in self.calls)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auction": self.auction_code,
            "action": self.action,
            "calls": [c.to_dict() for c in self.calls],
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def approval_call(token: str, spender: str, amount: int, non_fungible: bool) -> ContractCall:
    """ERC-20 approve(spender, amount) or ERC-721 approve(spender, tokenId)."""
    return ContractCall(
        to=token,
        function=FN_APPROVE,
        args=(spender, amount),
        standard="erc721" if non_fungible else "erc20",
    )


def payment_calls(
    bidding_token: str,
    contract: str,
    amount: int,
    function: str,
    args: Tuple[Any, ...],
    native_token: str = ZERO_ADDRESS,
) -> List[ContractCall]:
    """
    Calls needed to pay `amount` into an auction contract.

    Native currency is attached as call value; an ERC-20 bidding token is
    approved first and pulled by the contract.
    """
    if bidding_token.lower() == native_token.lower():
        return [ContractCall(to=contract, function=function, args=args, value=amount)]
    calls = []
    if amount > 0:
        calls.append(approval_call(bidding_token, contract, amount, non_fungible=False))
    calls.append(ContractCall(to=contract, function=function, args=args))
    return calls


# =============================================================================
# Auction creation
# =============================================================================


@dataclass(frozen=True)
class CreateAuctionParams:
    """
    Parameters of a new auction.

    Amounts are base units; conversion from display units happens before
    this point. `starting_price` is the start price of a decaying auction
    and the starting bid of the other protocols.
    """
    protocol: AuctionProtocol
    name: str
    description: str
    image_url: str
    asset_kind: AssetKind
    auctioned_token: str
    id_or_amount: int
    bidding_token: str
    starting_price: int
    duration: int = 0
    reserved_price: int = 0
    min_bid_delta: int = 0
    commit_duration: int = 0
    reveal_duration: int = 0

    def validate(self) -> Tuple[bool, str]:
        """
        Check the parameters against the protocol's rules.

        Returns:
            (is_valid, error_message)
        """
        for name in ("name", "description", "image_url"):
            valid, err = validate_string(getattr(self, name), name)
            if not valid:
                return False, err
        if not self.name.strip():
            return False, "name must not be empty"

        for name in ("auctioned_token", "bidding_token"):
            valid, err = validate_address(getattr(self, name), name)
            if not valid:
                return False, err

        for name in ("id_or_amount", "starting_price", "reserved_price", "min_bid_delta"):
            valid, err = validate_amount(getattr(self, name), name)
            if not valid:
                return False, err

        for name in ("duration", "commit_duration", "reveal_duration"):
            valid, err = validate_integer(getattr(self, name), name, 0, 2**64 - 1)
            if not valid:
                return False, err

        if self.asset_kind == AssetKind.FUNGIBLE and self.id_or_amount == 0:
            return False, "auctioned amount must be positive"

        protocol = self.protocol
        if protocol.is_decaying:
            if self.duration <= 0:
                return False, "duration must be positive"
            if self.reserved_price > self.starting_price:
                return False, "reserved_price must not exceed starting_price"
        elif protocol.is_ascending:
            if self.duration <= 0:
                return False, "duration must be positive"
            if self.min_bid_delta <= 0:
                return False, "min_bid_delta must be positive"
        else:
            if self.commit_duration <= 0 or self.reveal_duration <= 0:
                return False, "commit and reveal durations must be positive"

        return True, ""

    def contract_args(self) -> Tuple[Any, ...]:
        head = (
            self.name,
            self.description,
            self.image_url,
            int(self.asset_kind),
            self.auctioned_token,
            self.id_or_amount,
            self.bidding_token,
        )
        if self.protocol.is_decaying:
            return head + (self.starting_price, self.reserved_price, self.duration)
        if self.protocol.is_ascending:
            return head + (self.starting_price, self.min_bid_delta, self.duration)
        return head + (self.starting_price, self.commit_duration, self.reveal_duration)


__all__ = [
    "ContractCall",
    "TransactionPlan",
    "CreateAuctionParams",
    "approval_call",
    "payment_calls",
    "FN_APPROVE",
    "FN_CREATE_AUCTION",
    "FN_PLACE_BID",
    "FN_WITHDRAW_ITEM",
    "FN_WITHDRAW_FUNDS",
    "FN_COMMIT_BID",
    "FN_REVEAL_BID",
]
