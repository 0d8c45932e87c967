"""
netstr - varint length-prefixed framing for byte streams.

Splits a continuous byte stream into discrete opaque messages without
escaping or reserved delimiters.
"""

__version__ = "0.1.0"

from loguru import logger

from .protocol import (
    EndOfStream,
    Frame,
    NetstrDecoder,
    NetstrEncoder,
    NetstrError,
)

# library logging stays off until setup_logging() or logger.enable("netstr")
logger.disable("netstr")

__all__ = [
    "Frame",
    "NetstrEncoder",
    "NetstrDecoder",
    "NetstrError",
    "EndOfStream",
]
