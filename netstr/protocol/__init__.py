"""
Netstring framing protocol.

This package implements varint length-prefixed framing: the header codec,
the incremental tokenizer, and stream encoders/decoders built on them.
"""

from .aio import AsyncNetstrDecoder, AsyncNetstrEncoder
from .decoder import NetstrDecoder
from .encoder import NetstrEncoder
from .exceptions import (
    EndOfStream,
    FrameTooLargeError,
    HeaderOverflowError,
    NetstrDecodingError,
    NetstrError,
    NetstrIOError,
    ReadFailure,
    TruncatedBodyError,
    TruncatedHeaderError,
    WriteFailure,
)
from .frame import Frame
from .pool import BufferPool, default_pool, shared_pool
from .state import StreamState
from .tokenizer import SplitResult, split
from .varint import MAX_HEADER_SIZE, decode_header, encode_header, header_size, put_header

__all__ = [
    "Frame",
    "NetstrEncoder",
    "NetstrDecoder",
    "AsyncNetstrEncoder",
    "AsyncNetstrDecoder",
    "StreamState",
    "BufferPool",
    "default_pool",
    "shared_pool",
    "split",
    "SplitResult",
    "encode_header",
    "decode_header",
    "put_header",
    "header_size",
    "MAX_HEADER_SIZE",
    "NetstrError",
    "NetstrDecodingError",
    "NetstrIOError",
    "TruncatedHeaderError",
    "TruncatedBodyError",
    "HeaderOverflowError",
    "FrameTooLargeError",
    "ReadFailure",
    "WriteFailure",
    "EndOfStream",
]
