"""
Unit tests for marketplace configuration loading.
"""

import json
import os
from pathlib import Path

import pytest

from hammer.core.config import DEFAULT_CONTRACTS, MarketConfig, load_config
from hammer.core.protocol import AuctionProtocol
from hammer.crypto import ZERO_ADDRESS

ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No HAMMER_* variables or .env file leak in from the host."""
    for key in list(os.environ):
        if key.startswith("HAMMER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """MarketConfig defaults."""

    def test_defaults(self):
        config = MarketConfig()
        assert config.refresh_interval == 5
        assert config.native_token == ZERO_ADDRESS
        assert config.contract_for(AuctionProtocol.LINEAR) == DEFAULT_CONTRACTS[AuctionProtocol.LINEAR]

    def test_missing_contract(self):
        with pytest.raises(KeyError):
            MarketConfig().contract_for(AuctionProtocol.SEALED_BID)

    def test_ensure_directories(self, tmp_path):
        config = MarketConfig(data_dir=tmp_path / "d", log_dir=tmp_path / "l")
        config.ensure_directories()
        assert (tmp_path / "d").is_dir()
        assert (tmp_path / "l").is_dir()


class TestLoadConfig:
    """File and environment layering."""

    def test_no_sources(self):
        config = load_config()
        assert config.contracts == DEFAULT_CONTRACTS
        assert config.listing_size == 10

    def test_file(self, tmp_path):
        path = tmp_path / "hammer.json"
        path.write_text(json.dumps({
            "contracts": {"Vickrey": ADDRESS.lower()},
            "refresh_interval": 2,
            "data_dir": "store",
        }))
        config = load_config(str(path))
        assert config.contract_for(AuctionProtocol.SEALED_BID) == ADDRESS
        assert config.contract_for(AuctionProtocol.LINEAR) == DEFAULT_CONTRACTS[AuctionProtocol.LINEAR]
        assert config.refresh_interval == 2
        assert config.data_dir == Path("store")

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "hammer.json"
        path.write_text(json.dumps({"contracts": {"English": ADDRESS}, "batch_size": 20}))
        monkeypatch.setenv("HAMMER_EXPONENTIAL_CONTRACT", ADDRESS)
        monkeypatch.setenv("HAMMER_BATCH_SIZE", "30")

        config = load_config(str(path))
        assert config.contract_for(AuctionProtocol.ASCENDING) == ADDRESS
        assert config.contract_for(AuctionProtocol.EXPONENTIAL) == ADDRESS
        assert config.batch_size == 30

    def test_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(f"HAMMER_LOGARITHMIC_CONTRACT={ADDRESS}\n")
        try:
            config = load_config()
        finally:
            os.environ.pop("HAMMER_LOGARITHMIC_CONTRACT", None)
        assert config.contract_for(AuctionProtocol.LOGARITHMIC) == ADDRESS

    @pytest.mark.parametrize("settings", [
        {"contracts": {"Dutch": ADDRESS}},
        {"contracts": {"Linear": "0x1234"}},
        {"refresh_interval": 0},
        {"native_token": "native"},
    ])
    def test_invalid(self, tmp_path, settings):
        path = tmp_path / "hammer.json"
        path.write_text(json.dumps(settings))
        with pytest.raises(ValueError):
            load_config(str(path))
