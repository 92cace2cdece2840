"""
Marketplace configuration for Hammer.

Defines contract addresses per protocol, refresh cadence and local paths.
Values come from defaults, then an optional JSON file, then HAMMER_*
environment variables (a .env file is loaded first if present).
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from hammer.core.errors import UnknownProtocol
from hammer.core.protocol import AuctionProtocol
from hammer.crypto import ZERO_ADDRESS, is_address, to_checksum_address

ENV_PREFIX = "HAMMER_"

DEFAULT_CONTRACTS: Dict[AuctionProtocol, str] = {
    AuctionProtocol.LINEAR: "0xA6BD412DaeE7367F21c5eD36883b5731FD351B8B",
}


@dataclass
class MarketConfig:
    """Marketplace-wide configuration parameters"""

    # Auction contracts (protocol -> address)
    contracts: Dict[AuctionProtocol, str] = field(
        default_factory=lambda: dict(DEFAULT_CONTRACTS)
    )
    native_token: str = ZERO_ADDRESS  # Bidding token meaning "pay in native currency"

    # Refresh parameters
    refresh_interval: int = 5  # Seconds between re-reads of a live auction
    listing_size: int = 10     # Default number of latest auctions listed
    batch_size: int = 50       # Auctions read per contract for the full listing

    # Paths
    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")
    db_name: str = "watchlist.db"

    def contract_for(self, protocol: AuctionProtocol) -> str:
        """
        Contract address of a protocol.

        Raises:
            KeyError: no contract configured for the protocol
        """
        try:
            return self.contracts[protocol]
        except KeyError:
            raise KeyError(f"No contract address configured for {protocol}") from None

    def ensure_directories(self):
        """Create necessary directories"""
        self.data_dir.mkdir(exist_ok=True, parents=True)
        self.log_dir.mkdir(exist_ok=True, parents=True)


class MarketSettings(BaseModel):
    """Validated form of the file/environment settings."""

    contracts: Dict[str, str] = Field(default_factory=dict)
    native_token: str = ZERO_ADDRESS
    refresh_interval: int = Field(5, ge=1)
    listing_size: int = Field(10, ge=1)
    batch_size: int = Field(50, ge=1)
    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")
    db_name: str = "watchlist.db"

    @field_validator("contracts")
    @classmethod
    def _check_contracts(cls, v: Dict[str, str]) -> Dict[str, str]:
        checked = {}
        for tag, address in v.items():
            try:
                protocol = AuctionProtocol.parse(tag)
            except UnknownProtocol as e:
                raise ValueError(str(e)) from e
            if not is_address(address):
                raise ValueError(f"invalid contract address for {tag}: {address!r}")
            checked[protocol.tag] = to_checksum_address(address)
        return checked

    @field_validator("native_token")
    @classmethod
    def _check_native(cls, v: str) -> str:
        if not is_address(v):
            raise ValueError(f"invalid native token address: {v!r}")
        return to_checksum_address(v)

    def to_config(self) -> MarketConfig:
        contracts = dict(DEFAULT_CONTRACTS)
        contracts.update({AuctionProtocol.parse(t): a for t, a in self.contracts.items()})
        return MarketConfig(
            contracts=contracts,
            native_token=self.native_token,
            refresh_interval=self.refresh_interval,
            listing_size=self.listing_size,
            batch_size=self.batch_size,
            data_dir=self.data_dir,
            log_dir=self.log_dir,
            db_name=self.db_name,
        )


def _settings_from_env() -> Dict[str, object]:
    values: Dict[str, object] = {}
    contracts = {}
    for protocol in AuctionProtocol:
        address = os.environ.get(f"{ENV_PREFIX}{protocol.name}_CONTRACT")
        if address:
            contracts[protocol.tag] = address
    if contracts:
        values["contracts"] = contracts

    for key in ("native_token", "refresh_interval", "listing_size", "batch_size",
                "data_dir", "log_dir", "db_name"):
        value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value is not None:
            values[key] = value
    return values


# Global config instance (can be overridden)
config = MarketConfig()


def load_config(config_path: Optional[str] = None) -> MarketConfig:
    """
    Load configuration from file and environment, falling back to defaults.

    Args:
        config_path: Optional path to a JSON config file

    Returns:
        MarketConfig instance

    Raises:
        ValueError: file or environment holds invalid settings
    """
    # .env is looked up from the working directory, not from this package
    load_dotenv(find_dotenv(usecwd=True))

    raw: Dict[str, object] = {}
    if config_path:
        raw.update(json.loads(Path(config_path).read_text()))

    env = _settings_from_env()
    if "contracts" in env and isinstance(raw.get("contracts"), dict):
        merged = dict(raw["contracts"])
        merged.update(env.pop("contracts"))
        env["contracts"] = merged
    raw.update(env)

    try:
        settings = MarketSettings.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return settings.to_config()
