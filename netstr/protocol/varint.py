"""Unsigned LEB128 length headers.

Each byte carries 7 bits of the value, least significant group first. The
high bit is set on every byte except the last one.
"""

from .exceptions import HeaderOverflowError, TruncatedHeaderError

MAX_HEADER_SIZE = 10  # enough groups for any 64-bit length
MAX_LENGTH = (1 << 64) - 1


def _check_length(length: int) -> None:
    if length < 0:
        raise ValueError(f"Cannot encode negative length: {length}")
    if length > MAX_LENGTH:
        raise ValueError(f"Length does not fit in 64 bits: {length}")


def header_size(length: int) -> int:
    """Return the number of bytes needed to encode ``length``."""
    _check_length(length)
    size = 1
    while length >= 0x80:
        length >>= 7
        size += 1
    return size


def put_header(buffer: bytearray | memoryview, length: int) -> int:
    """
    Write the header for ``length`` to the start of ``buffer``.

    Args:
        buffer: Writable buffer of at least ``MAX_HEADER_SIZE`` bytes
        length: Payload length to encode

    Returns:
        Number of bytes written
    """
    _check_length(length)
    i = 0
    while length >= 0x80:
        buffer[i] = (length & 0x7F) | 0x80
        length >>= 7
        i += 1
    buffer[i] = length
    return i + 1


def encode_header(length: int) -> bytes:
    """
    Encode a payload length as a canonical varint header.

    Args:
        length: Non-negative payload length

    Returns:
        Minimal-length header bytes
    """
    buffer = bytearray(MAX_HEADER_SIZE)
    return bytes(buffer[: put_header(buffer, length)])


def decode_header(buffer: bytes | bytearray | memoryview) -> tuple[int, int]:
    """
    Decode a varint header from the start of ``buffer``.

    Non-canonical encodings (redundant trailing zero groups) are accepted
    as long as they fit in ``MAX_HEADER_SIZE`` bytes.

    Args:
        buffer: Bytes starting with a header

    Returns:
        Tuple of (length, header bytes consumed)

    Raises:
        TruncatedHeaderError: If the buffer ends inside the header
        HeaderOverflowError: If the header does not fit in 64 bits
    """
    length = 0
    shift = 0
    for i in range(min(len(buffer), MAX_HEADER_SIZE)):
        byte = buffer[i]
        if byte < 0x80:
            if i == MAX_HEADER_SIZE - 1 and byte > 1:
                raise HeaderOverflowError("Invalid header: exceeds 64 bits")
            return length | (byte << shift), i + 1
        length |= (byte & 0x7F) << shift
        shift += 7

    if len(buffer) >= MAX_HEADER_SIZE:
        raise HeaderOverflowError("Invalid header: exceeds 64 bits")
    raise TruncatedHeaderError("Input ended before end of header")
