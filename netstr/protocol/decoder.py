"""Netstring stream decoder."""

from collections.abc import Iterator
from typing import NoReturn, Protocol

from ..common.config import DEFAULT_MAX_FRAME_SIZE, DEFAULT_READ_SIZE, CodecConfig
from ..common.log_base import get_logger
from .exceptions import (
    EndOfStream,
    NetstrDecodingError,
    NetstrError,
    ReadFailure,
    TruncatedHeaderError,
)
from .frame import Frame
from .state import StreamState
from .tokenizer import split
from .varint import decode_header

logger = get_logger(__name__)

# Consecutive reads returning None before the source is considered stuck
MAX_EMPTY_READS = 100


def next_read_size(buffer: bytearray, read_size: int) -> int:
    """Number of bytes to request so a read never passes the current frame.

    While the header is incomplete this is a single byte; afterwards it is
    the rest of the payload, capped at ``read_size``.
    """
    try:
        length, offset = decode_header(buffer)
    except TruncatedHeaderError:
        return 1
    return min(offset + length - len(buffer), read_size)


class Source(Protocol):
    """Sequential byte source, such as a binary file or ``io.BytesIO``.

    ``read`` returns b"" at end of input and None when no data is
    available yet.
    """

    def read(self, size: int, /) -> bytes | None: ...


class NetstrDecoder:
    """Reads netstring frames from a source, one frame per ``decode`` call.

    The decoder only reads the bytes needed to complete the current frame.
    Decoded frames are independent copies and stay valid after later calls.
    End of stream, read failures and parse errors are sticky until ``reset``.
    Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        source: Source,
        read_size: int = DEFAULT_READ_SIZE,
        max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE,
    ) -> None:
        """
        Initialize decoder.

        Args:
            source: Input to read frames from
            read_size: Largest single read issued while filling a payload
            max_frame_size: Reject frames longer than this (None = no limit)
        """
        if read_size <= 0:
            raise ValueError(f"read_size must be positive, got {read_size}")

        self.read_size = read_size
        self.max_frame_size = max_frame_size
        self._source = source
        self._buffer = bytearray()
        self._exhausted = False
        self._state = StreamState.ACTIVE
        self._error: NetstrError | None = None

    @classmethod
    def from_config(cls, source: Source, config: CodecConfig) -> "NetstrDecoder":
        """Create a decoder using settings from ``config``."""
        return cls(
            source, read_size=config.read_size, max_frame_size=config.max_frame_size
        )

    @property
    def state(self) -> StreamState:
        """Current stream state."""
        return self._state

    @property
    def error(self) -> NetstrError | None:
        """The sticky terminal condition, if any."""
        return self._error

    def decode(self) -> Frame:
        """
        Read the next frame.

        Returns:
            The next frame

        Raises:
            EndOfStream: If input ended cleanly on a frame boundary
            NetstrDecodingError: If the input is malformed or truncated
            ReadFailure: If the source fails
        """
        if self._error is not None:
            # a fresh traceback per call keeps the stored error from growing
            raise self._error.with_traceback(None)

        while True:
            if self._exhausted and not self._buffer:
                self._error = EndOfStream("End of stream")
                self._state = StreamState.ENDED
                logger.debug("Decoder reached end of stream")
                raise self._error

            try:
                consumed, payload = split(
                    self._buffer, self._exhausted, self.max_frame_size
                )
            except NetstrDecodingError as e:
                self._fail(e)

            if consumed:
                with payload:
                    frame = Frame(payload)
                self._buffer = self._buffer[consumed:]
                return frame

            self._fill()

    def reset(self, source: Source) -> None:
        """Bind a new source, dropping buffered bytes and terminal state."""
        if self._state is not StreamState.ACTIVE or self._buffer:
            logger.debug(
                "Decoder reset",
                previous_state=self._state.value,
                discarded=len(self._buffer),
            )
        self._source = source
        self._buffer = bytearray()
        self._exhausted = False
        self._error = None
        self._state = StreamState.ACTIVE

    def __iter__(self) -> Iterator[Frame]:
        """Yield frames until end of stream."""
        while True:
            try:
                yield self.decode()
            except EndOfStream:
                return

    def _fill(self) -> None:
        """Append the next chunk of input to the buffer."""
        size = next_read_size(self._buffer, self.read_size)
        for _ in range(MAX_EMPTY_READS):
            try:
                chunk = self._source.read(size)
            except Exception as e:
                self._fail(ReadFailure(f"Failed to read from source: {e}"), e)

            if chunk is None:
                continue
            if not chunk:
                self._exhausted = True
            else:
                self._buffer += chunk
            return

        self._fail(
            ReadFailure(f"Source returned no data after {MAX_EMPTY_READS} reads")
        )

    def _fail(self, error: NetstrError, cause: Exception | None = None) -> NoReturn:
        """Record ``error`` as the sticky failure and raise it."""
        self._error = error
        self._state = StreamState.FAILED
        logger.debug(
            "Decoder failed", error_type=type(error).__name__, error=str(error)
        )
        if cause is not None:
            raise error from cause
        raise error
