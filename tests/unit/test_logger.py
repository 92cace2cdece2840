"""
Unit tests for logging setup.

Tests cover:
1. Auction-tagged messages
2. File logging and reconfiguration
"""

import logging

from hammer.core.auction import SnapshotCache
from hammer.utils.logger import HammerLogger, get_auction_logger, get_logger, setup_logging


class TestAuctionLogger:
    """Messages about one auction carry its code."""

    def test_prefix_and_attribute(self, caplog):
        caplog.set_level(logging.INFO, logger="hammer")
        get_auction_logger("service", "TGluZWFyOjc").info("Built purchase plan")
        record = caplog.records[-1]
        assert record.name == "hammer.service"
        assert record.getMessage() == "[TGluZWFyOjc] Built purchase plan"
        assert record.auction == "TGluZWFyOjc"

    def test_out_of_order_refresh_is_tagged(self, caplog, make_snapshot):
        caplog.set_level(logging.DEBUG, logger="hammer")
        cache = SnapshotCache()
        cache.replace(make_snapshot("Linear", block_number=5))
        assert not cache.replace(make_snapshot("Linear", block_number=4))

        code = make_snapshot("Linear").code
        assert any(r.getMessage().startswith(f"[{code}] Ignoring") for r in caplog.records)


class TestSetup:
    """setup_logging() reconfigures the hammer logger tree."""

    def test_file_logging(self, tmp_path):
        log_dir = tmp_path / "logs"
        try:
            setup_logging(log_dir=str(log_dir), log_to_file=True)
            get_logger("test").info("written to file")
            for handler in logging.getLogger("hammer").handlers:
                handler.flush()
            assert HammerLogger.log_file() == log_dir / "hammer.log"
            assert "written to file" in (log_dir / "hammer.log").read_text()
        finally:
            setup_logging()
        assert HammerLogger.log_file() is None

    def test_level_can_be_raised_later(self):
        try:
            setup_logging(level=logging.DEBUG)
            assert logging.getLogger("hammer").level == logging.DEBUG
        finally:
            setup_logging()
        assert logging.getLogger("hammer").level == logging.INFO
