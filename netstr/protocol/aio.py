"""Netstring framing over asyncio streams."""

import asyncio
from collections.abc import AsyncIterator
from typing import NoReturn

from ..common.config import DEFAULT_MAX_FRAME_SIZE, DEFAULT_READ_SIZE
from ..common.log_base import get_logger
from .decoder import next_read_size
from .exceptions import (
    EndOfStream,
    NetstrDecodingError,
    NetstrError,
    ReadFailure,
    WriteFailure,
)
from .frame import Frame
from .state import StreamState
from .tokenizer import split
from .varint import encode_header

logger = get_logger(__name__)


class AsyncNetstrEncoder:
    """Writes netstring frames to an ``asyncio.StreamWriter``.

    Failure handling matches ``NetstrEncoder``: the first error is sticky.
    """

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer
        self._state = StreamState.ACTIVE
        self._error: WriteFailure | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def error(self) -> WriteFailure | None:
        return self._error

    async def encode(self, payload: bytes | bytearray | memoryview) -> int:
        """
        Write one frame and wait for the writer to drain.

        Returns:
            Total number of bytes written

        Raises:
            WriteFailure: If the writer fails now or failed on an earlier call
        """
        # the stored error outlives this frame; do not let it pin the payload
        if self._error is not None:
            del payload
            raise self._error.with_traceback(None)

        body = bytes(payload)
        header = encode_header(len(body))
        try:
            self._writer.write(header)
            self._writer.write(body)
            await self._writer.drain()
        except Exception as e:
            del payload, body
            self._error = WriteFailure(f"Failed to write frame: {e}")
            self._state = StreamState.FAILED
            logger.debug("Async encoder failed", error=str(e))
            raise self._error from e

        return len(header) + len(body)

    def reset(self, writer: asyncio.StreamWriter) -> None:
        """Bind a new writer and clear any sticky failure."""
        self._writer = writer
        self._error = None
        self._state = StreamState.ACTIVE


class AsyncNetstrDecoder:
    """Reads netstring frames from an ``asyncio.StreamReader``.

    Same contract as ``NetstrDecoder``: one frame per call, frames are
    independent copies, terminal conditions are sticky until ``reset``.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        read_size: int = DEFAULT_READ_SIZE,
        max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE,
    ) -> None:
        if read_size <= 0:
            raise ValueError(f"read_size must be positive, got {read_size}")

        self.read_size = read_size
        self.max_frame_size = max_frame_size
        self._reader = reader
        self._buffer = bytearray()
        self._exhausted = False
        self._state = StreamState.ACTIVE
        self._error: NetstrError | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def error(self) -> NetstrError | None:
        return self._error

    async def decode(self) -> Frame:
        """
        Read the next frame.

        Raises:
            EndOfStream: If input ended cleanly on a frame boundary
            NetstrDecodingError: If the input is malformed or truncated
            ReadFailure: If the reader fails
        """
        if self._error is not None:
            raise self._error.with_traceback(None)

        while True:
            if self._exhausted and not self._buffer:
                self._error = EndOfStream("End of stream")
                self._state = StreamState.ENDED
                logger.debug("Async decoder reached end of stream")
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

            await self._fill()

    def reset(self, reader: asyncio.StreamReader) -> None:
        """Bind a new reader, dropping buffered bytes and terminal state."""
        self._reader = reader
        self._buffer = bytearray()
        self._exhausted = False
        self._error = None
        self._state = StreamState.ACTIVE

    def __aiter__(self) -> AsyncIterator[Frame]:
        return self._iter_frames()

    async def _iter_frames(self) -> AsyncIterator[Frame]:
        while True:
            try:
                yield await self.decode()
            except EndOfStream:
                return

    async def _fill(self) -> None:
        size = next_read_size(self._buffer, self.read_size)
        try:
            chunk = await self._reader.readexactly(size)
        except asyncio.IncompleteReadError as e:
            chunk = e.partial
            self._exhausted = True
        except Exception as e:
            self._fail(ReadFailure(f"Failed to read from stream: {e}"), e)
        self._buffer += chunk

    def _fail(self, error: NetstrError, cause: Exception | None = None) -> NoReturn:
        self._error = error
        self._state = StreamState.FAILED
        logger.debug(
            "Async decoder failed", error_type=type(error).__name__, error=str(error)
        )
        if cause is not None:
            raise error from cause
        raise error
