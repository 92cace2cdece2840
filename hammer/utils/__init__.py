"""Shared utilities: logging and input validation."""

from hammer.utils.logger import get_logger, setup_logging, HammerLogger

__all__ = ["get_logger", "setup_logging", "HammerLogger"]
