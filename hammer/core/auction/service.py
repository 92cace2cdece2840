"""
Auction Service Dispatch - one service per protocol behind a common interface.

Every service answers the same capability set:
- quote_price: the price to show right now
- validate_bid: accept or refuse a bid amount
- build_purchase_or_bid_operation: the calls for "Buy now" / "Place bid"
- build_funds_withdrawal_operation: the auctioneer collecting proceeds
- build_create_operation: the calls for listing a new auction

Decaying-price auctions settle by direct purchase at the quoted price, so
their bid path refuses with UnsupportedOperation. Sealed-bid auctions route
the same "bid" action to commit or reveal according to the phase resolver.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Union, assert_never

from hammer.core.auction.cache import SnapshotCache
from hammer.core.auction.operations import (
    FN_COMMIT_BID,
    FN_CREATE_AUCTION,
    FN_PLACE_BID,
    FN_REVEAL_BID,
    FN_WITHDRAW_FUNDS,
    FN_WITHDRAW_ITEM,
    ContractCall,
    CreateAuctionParams,
    TransactionPlan,
    approval_call,
    payment_calls,
)
from hammer.core.auction.phase import Phase, phase, require_phase
from hammer.core.auction.pricing import (
    check_bid,
    check_purchase,
    current_price,
    minimum_next_bid,
    sealed_bid_price,
)
from hammer.core.auction.snapshot import AuctionSnapshot
from hammer.core.config import MarketConfig
from hammer.core.errors import (
    AuctionAlreadyClaimed,
    AuctionEnded,
    BelowMinimumBid,
    UnknownProtocol,
    UnsupportedOperation,
)
from hammer.core.protocol import AssetKind, AuctionProtocol
from hammer.crypto import create_bid_commitment
from hammer.utils.logger import get_auction_logger, get_logger
from hammer.utils.validation import validate_amount

logger = get_logger("service")


# =============================================================================
# Base service
# =============================================================================


class AuctionService(ABC):
    """Protocol-specific pricing, validation and call building."""

    protocol: AuctionProtocol

    def __init__(
        self,
        config: Optional[MarketConfig] = None,
        cache: Optional[SnapshotCache] = None,
    ):
        self.config = config or MarketConfig()
        self.cache = cache

    @property
    def contract(self) -> str:
        try:
            return self.config.contract_for(self.protocol)
        except KeyError:
            raise self._unsupported(
                "transactions",
                f"no contract configured, set HAMMER_{self.protocol.name}_CONTRACT",
            ) from None

    def _unsupported(self, operation: str, hint: str = "") -> UnsupportedOperation:
        error = UnsupportedOperation(self.protocol, operation, hint)
        logger.error(str(error))
        return error

    def _check_snapshot(self, snapshot: AuctionSnapshot) -> None:
        if snapshot.protocol is not self.protocol:
            raise self._unsupported(f"snapshots of {snapshot.protocol} auctions")
        if self.cache is not None:
            self.cache.ensure_current(snapshot)

    def _plan(self, snapshot_code: str, action: str, calls) -> TransactionPlan:
        plan = TransactionPlan(auction_code=snapshot_code, action=action, calls=tuple(calls))
        get_auction_logger("service", snapshot_code).info(
            f"Built {action} plan ({len(plan.calls)} calls, value={plan.total_value})"
        )
        return plan

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    @abstractmethod
    def quote_price(self, snapshot: AuctionSnapshot, now: int) -> Optional[int]:
        """Price to display at `now`, None when there is none to show."""

    @abstractmethod
    def validate_bid(self, snapshot: AuctionSnapshot, amount: int, now: int) -> None:
        """Raise a BidRejected subclass if the bid cannot be accepted."""

    @abstractmethod
    def build_purchase_or_bid_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: Optional[int] = None,
        salt: Optional[bytes] = None,
    ) -> TransactionPlan:
        """Calls for the auction's main user action."""

    def build_funds_withdrawal_operation(self, snapshot: AuctionSnapshot) -> TransactionPlan:
        """Auctioneer collects the proceeds held by the contract."""
        self._check_snapshot(snapshot)
        call = ContractCall(
            to=self.contract,
            function=FN_WITHDRAW_FUNDS,
            args=(snapshot.id.numeric_id,),
        )
        return self._plan(snapshot.code, "withdraw_funds", [call])

    def build_create_operation(self, params: CreateAuctionParams) -> TransactionPlan:
        """
        Approve the auctioned asset to the contract, then create the auction.

        Raises:
            UnsupportedOperation: params are for another protocol
            ValueError: params fail validation
        """
        if params.protocol is not self.protocol:
            raise self._unsupported(f"creating {params.protocol} auctions")
        valid, err = params.validate()
        if not valid:
            raise ValueError(err)

        calls = [
            approval_call(
                params.auctioned_token,
                self.contract,
                params.id_or_amount,
                non_fungible=params.asset_kind == AssetKind.NFT,
            ),
            ContractCall(
                to=self.contract,
                function=FN_CREATE_AUCTION,
                args=params.contract_args(),
            ),
        ]
        return self._plan(f"new-{self.protocol.tag}", "create", calls)


# =============================================================================
# Ascending (English)
# =============================================================================


class AscendingAuctionService(AuctionService):
    protocol = AuctionProtocol.ASCENDING

    def quote_price(self, snapshot: AuctionSnapshot, now: int) -> Optional[int]:
        self._check_snapshot(snapshot)
        return minimum_next_bid(snapshot) or None

    def validate_bid(self, snapshot: AuctionSnapshot, amount: int, now: int) -> None:
        self._check_snapshot(snapshot)
        check_bid(snapshot, amount, now)

    def build_purchase_or_bid_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: Optional[int] = None,
        salt: Optional[bytes] = None,
    ) -> TransactionPlan:
        if amount is None:
            raise ValueError("amount is required to place a bid")
        self.validate_bid(snapshot, amount, now)
        calls = payment_calls(
            snapshot.bidding_asset.token_address,
            self.contract,
            amount,
            FN_PLACE_BID,
            (snapshot.id.numeric_id, amount),
            native_token=self.config.native_token,
        )
        return self._plan(snapshot.code, "bid", calls)


# =============================================================================
# Decaying price (Linear / Exponential / Logarithmic)
# =============================================================================


class DecayingAuctionService(AuctionService):
    """Reverse Dutch auction: buy now at the current price."""

    def __init__(
        self,
        protocol: AuctionProtocol,
        config: Optional[MarketConfig] = None,
        cache: Optional[SnapshotCache] = None,
    ):
        if not protocol.is_decaying:
            raise ValueError(f"{protocol} is not a decaying-price protocol")
        self.protocol = protocol
        super().__init__(config, cache)

    def quote_price(self, snapshot: AuctionSnapshot, now: int) -> Optional[int]:
        self._check_snapshot(snapshot)
        return current_price(snapshot, now)

    def validate_bid(self, snapshot: AuctionSnapshot, amount: int, now: int) -> None:
        raise self._unsupported("placeBid", "buy at the quoted price with withdrawItem")

    def validate_purchase(self, snapshot: AuctionSnapshot, now: int) -> int:
        """
        Check the auction can still be bought and return the price.

        Raises:
            AuctionAlreadyClaimed, AuctionEnded
        """
        self._check_snapshot(snapshot)
        check_purchase(snapshot, now)
        return current_price(snapshot, now)

    def build_purchase_or_bid_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: Optional[int] = None,
        salt: Optional[bytes] = None,
    ) -> TransactionPlan:
        """
        Buy at the current price.

        `amount`, if given, is the most the buyer agreed to pay; a quote
        above it is refused. The price only falls between quote and
        settlement, so approving the quote covers what the contract pulls.
        """
        price = self.validate_purchase(snapshot, now)
        if amount is not None and amount < price:
            raise BelowMinimumBid(amount, price)

        calls = payment_calls(
            snapshot.bidding_asset.token_address,
            self.contract,
            price,
            FN_WITHDRAW_ITEM,
            (snapshot.id.numeric_id,),
            native_token=self.config.native_token,
        )
        return self._plan(snapshot.code, "purchase", calls)


# =============================================================================
# Sealed bid (Vickrey)
# =============================================================================


class SealedBidAuctionService(AuctionService):
    protocol = AuctionProtocol.SEALED_BID

    def quote_price(self, snapshot: AuctionSnapshot, now: int) -> Optional[int]:
        self._check_snapshot(snapshot)
        return sealed_bid_price(snapshot, now)

    def validate_bid(self, snapshot: AuctionSnapshot, amount: int, now: int) -> None:
        self._check_snapshot(snapshot)
        valid, err = validate_amount(amount)
        if not valid:
            raise ValueError(err)
        if snapshot.is_claimed:
            raise AuctionAlreadyClaimed(snapshot.code)
        if phase(snapshot, now) == Phase.ENDED:
            raise AuctionEnded(snapshot.reveal_phase_end, now)
        minimum = max(snapshot.starting_price, 1)
        if amount < minimum:
            raise BelowMinimumBid(amount, minimum)

    def build_commit_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: int,
        salt: bytes,
    ) -> TransactionPlan:
        """Publish the sealed commitment; nothing is paid yet."""
        self._check_snapshot(snapshot)
        require_phase(snapshot, now, Phase.COMMIT)
        self.validate_bid(snapshot, amount, now)
        commitment = create_bid_commitment(amount, salt)
        call = ContractCall(
            to=self.contract,
            function=FN_COMMIT_BID,
            args=(snapshot.id.numeric_id, commitment),
        )
        return self._plan(snapshot.code, "commit", [call])

    def build_reveal_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: int,
        salt: bytes,
    ) -> TransactionPlan:
        """Open the commitment and pay the bid amount."""
        self._check_snapshot(snapshot)
        require_phase(snapshot, now, Phase.REVEAL)
        self.validate_bid(snapshot, amount, now)
        calls = payment_calls(
            snapshot.bidding_asset.token_address,
            self.contract,
            amount,
            FN_REVEAL_BID,
            (snapshot.id.numeric_id, amount, bytes(salt)),
            native_token=self.config.native_token,
        )
        return self._plan(snapshot.code, "reveal", calls)

    def build_purchase_or_bid_operation(
        self,
        snapshot: AuctionSnapshot,
        now: int,
        amount: Optional[int] = None,
        salt: Optional[bytes] = None,
    ) -> TransactionPlan:
        if amount is None or salt is None:
            raise ValueError("sealed bids need both amount and salt")
        self._check_snapshot(snapshot)
        if phase(snapshot, now) == Phase.COMMIT:
            return self.build_commit_operation(snapshot, now, amount, salt)
        return self.build_reveal_operation(snapshot, now, amount, salt)


# =============================================================================
# Dispatch
# =============================================================================


def _build_service(
    protocol: AuctionProtocol,
    config: Optional[MarketConfig],
    cache: Optional[SnapshotCache],
) -> AuctionService:
    match protocol:
        case AuctionProtocol.ASCENDING:
            return AscendingAuctionService(config, cache)
        case AuctionProtocol.LINEAR | AuctionProtocol.EXPONENTIAL | AuctionProtocol.LOGARITHMIC:
            return DecayingAuctionService(protocol, config, cache)
        case AuctionProtocol.SEALED_BID:
            return SealedBidAuctionService(config, cache)
        case _:
            assert_never(protocol)


class ServiceRegistry:
    """Protocol -> service lookup sharing one config and snapshot cache."""

    def __init__(
        self,
        config: Optional[MarketConfig] = None,
        cache: Optional[SnapshotCache] = None,
    ):
        self.config = config or MarketConfig()
        self.cache = cache
        self._services: Dict[AuctionProtocol, AuctionService] = {}

    def service_for(self, protocol: Union[AuctionProtocol, str]) -> AuctionService:
        """
        Raises:
            UnknownProtocol: protocol tag outside the supported set
        """
        try:
            protocol = AuctionProtocol.parse(protocol)
        except UnknownProtocol:
            logger.error(f"No auction service for protocol {protocol!r}")
            raise

        service = self._services.get(protocol)
        if service is None:
            service = _build_service(protocol, self.config, self.cache)
            self._services[protocol] = service
        return service


_default_registry: Optional[ServiceRegistry] = None


def service_for(
    protocol: Union[AuctionProtocol, str],
    config: Optional[MarketConfig] = None,
) -> AuctionService:
    """Service for a protocol, using the default registry unless a config is given."""
    global _default_registry
    if config is not None:
        return ServiceRegistry(config).service_for(protocol)
    if _default_registry is None:
        _default_registry = ServiceRegistry()
    return _default_registry.service_for(protocol)


__all__ = [
    "AuctionService",
    "AscendingAuctionService",
    "DecayingAuctionService",
    "SealedBidAuctionService",
    "ServiceRegistry",
    "service_for",
]
