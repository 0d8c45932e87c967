"""Configuration and logging for netstr."""

from .config import CodecConfig, LogConfig, NetstrConfig
from .log_base import get_logger, setup_logging

__all__ = [
    "NetstrConfig",
    "CodecConfig",
    "LogConfig",
    "get_logger",
    "setup_logging",
]
