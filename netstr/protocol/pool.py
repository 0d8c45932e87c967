"""Reusable buffers for length headers."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .varint import MAX_HEADER_SIZE


class BufferPool:
    """A thread-safe free list of fixed-size byte buffers.

    Buffers handed out by ``acquire`` are not zeroed: overwrite the part you
    use before reading it. After ``release`` the caller must not keep or
    modify the buffer.
    """

    def __init__(self, buffer_size: int = MAX_HEADER_SIZE, max_free: int = 64) -> None:
        """
        Initialize pool.

        Args:
            buffer_size: Size of every buffer in the pool
            max_free: Maximum number of idle buffers kept for reuse
        """
        if buffer_size < MAX_HEADER_SIZE:
            raise ValueError(
                f"buffer_size must be at least {MAX_HEADER_SIZE}, got {buffer_size}"
            )
        if max_free < 0:
            raise ValueError(f"max_free must be non-negative, got {max_free}")

        self.buffer_size = buffer_size
        self.max_free = max_free
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    def acquire(self) -> bytearray:
        """Take a buffer from the pool, allocating one if none are free."""
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray(self.buffer_size)

    def release(self, buffer: bytearray) -> None:
        """
        Return a buffer to the pool.

        Args:
            buffer: Buffer previously obtained from ``acquire``

        Raises:
            ValueError: If the buffer does not belong to a pool of this size
        """
        if not isinstance(buffer, bytearray) or len(buffer) != self.buffer_size:
            raise ValueError("Buffer was not acquired from this pool")

        with self._lock:
            if len(self._free) < self.max_free:
                self._free.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        """Acquire a buffer for the duration of a ``with`` block."""
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)

    @property
    def free_count(self) -> int:
        """Number of idle buffers currently held."""
        with self._lock:
            return len(self._free)


_shared_pools: dict[int, BufferPool] = {}
_shared_pools_lock = threading.Lock()


def shared_pool(max_free: int = 64) -> BufferPool:
    """Return the process-wide header pool keeping up to ``max_free`` buffers.

    Every caller asking for the same ``max_free`` gets the same pool.
    """
    with _shared_pools_lock:
        pool = _shared_pools.get(max_free)
        if pool is None:
            pool = _shared_pools[max_free] = BufferPool(max_free=max_free)
        return pool


default_pool = shared_pool()
