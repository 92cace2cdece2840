"""
Centralized logging configuration for Hammer.

Provides colored console logging, an optional size-rotated log file and
separate loggers for the engine subsystems (identity, mapper, pricing,
phase, service, storage). Messages about one auction go through an
adapter that tags them with the auction's code, so a single auction can
be followed with a plain grep of the log.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import colorlog

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE = "hammer.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


class HammerLogger:
    """Logging setup shared by every Hammer subsystem"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        (Re)configure the "hammer" logger tree.

        Every call replaces the handlers, so the CLI can raise the level
        after module-level loggers were created with the defaults.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for the log file. If None, uses ./logs
            log_to_file: Also write a rotated hammer.log
        """
        root_logger = logging.getLogger("hammer")
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt=DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        ))
        root_logger.addHandler(console_handler)

        cls._log_dir = None
        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(exist_ok=True, parents=True)
            file_handler = RotatingFileHandler(
                cls._log_dir / LOG_FILE,
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUPS,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'pricing', 'mapper', 'storage')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"hammer.{name}")

    @classmethod
    def log_file(cls) -> Optional[Path]:
        """Path of the current log file, None when logging to console only."""
        return cls._log_dir / LOG_FILE if cls._log_dir else None


class AuctionLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with "[<auction code>]"."""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})["auction"] = self.extra["auction"]
        return f"[{self.extra['auction']}] {msg}", kwargs


def get_logger(name: str) -> logging.Logger:
    return HammerLogger.get_logger(name)


def get_auction_logger(name: str, code: str) -> AuctionLogAdapter:
    """Subsystem logger whose messages carry one auction's code."""
    return AuctionLogAdapter(HammerLogger.get_logger(name), {"auction": code})


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration"""
    HammerLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
