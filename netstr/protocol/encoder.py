"""Netstring stream encoder."""

from typing import Protocol

from ..common.config import CodecConfig
from ..common.log_base import get_logger
from .exceptions import WriteFailure
from .pool import BufferPool, default_pool, shared_pool
from .state import StreamState
from .varint import put_header

logger = get_logger(__name__)


class Sink(Protocol):
    """Sequential byte sink, such as a binary file or ``io.BytesIO``.

    ``write`` returns the number of bytes accepted, or None when the whole
    buffer was written.
    """

    def write(self, data: memoryview, /) -> int | None: ...


class NetstrEncoder:
    """Writes netstring frames to a sink.

    The first write failure is sticky: every later ``encode`` call raises the
    same ``WriteFailure`` without touching the sink until ``reset``.
    Instances are not safe for concurrent use.
    """

    def __init__(self, sink: Sink, pool: BufferPool | None = None) -> None:
        """
        Initialize encoder.

        Args:
            sink: Destination for encoded frames
            pool: Header buffer pool (shared default pool if None)
        """
        self._sink = sink
        self._pool = pool or default_pool
        self._state = StreamState.ACTIVE
        self._error: WriteFailure | None = None

    @classmethod
    def from_config(cls, sink: Sink, config: CodecConfig) -> "NetstrEncoder":
        """Create an encoder using the shared pool sized by ``config``."""
        return cls(sink, pool=shared_pool(config.pool_max_free))

    @property
    def pool(self) -> BufferPool:
        """Pool the header buffers come from."""
        return self._pool

    @property
    def state(self) -> StreamState:
        """Current stream state."""
        return self._state

    @property
    def error(self) -> WriteFailure | None:
        """The sticky failure, if any."""
        return self._error

    def encode(self, payload: bytes | bytearray | memoryview) -> int:
        """
        Write one frame: the length header, then the payload.

        Args:
            payload: Frame contents

        Returns:
            Total number of bytes written

        Raises:
            WriteFailure: If the sink fails now or failed on an earlier call
        """
        # the stored error outlives this frame; do not let it pin the payload
        if self._error is not None:
            del payload
            raise self._error.with_traceback(None)

        try:
            with memoryview(payload) as view, view.cast("B") as body:
                buffer = self._pool.acquire()
                try:
                    size = put_header(buffer, body.nbytes)
                    with memoryview(buffer) as header:
                        self._write_all(header[:size], "header")
                finally:
                    self._pool.release(buffer)

                self._write_all(body, "body")
                return size + body.nbytes
        except WriteFailure:
            del payload
            raise

    def reset(self, sink: Sink) -> None:
        """Bind a new sink and clear any sticky failure."""
        if self._state is not StreamState.ACTIVE:
            logger.debug("Encoder reset", previous_state=self._state.value)
        self._sink = sink
        self._error = None
        self._state = StreamState.ACTIVE

    def _write_all(self, data: memoryview, part: str) -> None:
        """Write ``data`` completely, recording the first failure."""
        try:
            while data:
                written = self._sink.write(data)
                if written is None:
                    return
                if written <= 0:
                    raise OSError(f"short write: {len(data)} bytes not written")
                data = data[written:]
        except Exception as e:
            # the traceback keeps this frame and the sink's alive
            data.release()
            self._error = WriteFailure(f"Failed to write frame {part}: {e}")
            self._state = StreamState.FAILED
            logger.debug("Encoder failed", part=part, error=str(e))
            raise self._error from e
