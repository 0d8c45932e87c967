"""Incremental frame tokenizer."""

from typing import NamedTuple

from .exceptions import (
    FrameTooLargeError,
    TruncatedBodyError,
    TruncatedHeaderError,
)
from .varint import decode_header


class SplitResult(NamedTuple):
    """Outcome of a single ``split`` call.

    ``consumed == 0`` and ``frame is None`` means more data is needed.
    """

    consumed: int
    frame: memoryview | None


NEED_MORE_DATA = SplitResult(0, None)


def split(
    buffer: bytes | bytearray | memoryview,
    at_eof: bool,
    max_frame_size: int | None = None,
) -> SplitResult:
    """
    Find the first complete frame at the start of ``buffer``.

    When more data is needed the caller must call again with the same
    unconsumed bytes followed by new ones. The returned frame is a view into
    ``buffer`` and is only valid until the buffer is modified.

    Args:
        buffer: Accumulated input, starting on a frame boundary
        at_eof: True if no more input will follow
        max_frame_size: Reject declared lengths above this (None = no limit)

    Returns:
        SplitResult with the bytes consumed and the payload view

    Raises:
        HeaderOverflowError: If the header does not fit in 64 bits
        TruncatedHeaderError: If at_eof and the header is incomplete
        TruncatedBodyError: If at_eof and the payload is incomplete
        FrameTooLargeError: If the declared length exceeds max_frame_size
    """
    try:
        length, offset = decode_header(buffer)
    except TruncatedHeaderError:
        if at_eof:
            raise
        return NEED_MORE_DATA

    if max_frame_size is not None and length > max_frame_size:
        raise FrameTooLargeError(
            f"Frame length {length} exceeds limit of {max_frame_size} bytes"
        )

    end = offset + length
    if len(buffer) < end:
        if at_eof:
            raise TruncatedBodyError(
                f"Input ended before end of body: "
                f"expected {length} bytes, got {len(buffer) - offset}"
            )
        return NEED_MORE_DATA

    return SplitResult(end, memoryview(buffer)[offset:end])
