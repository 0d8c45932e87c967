"""Unit tests for the asyncio framing adapters."""

import asyncio
import gc
import traceback
import weakref

import pytest

from netstr.protocol import (
    AsyncNetstrDecoder,
    AsyncNetstrEncoder,
    EndOfStream,
    FrameTooLargeError,
    HeaderOverflowError,
    ReadFailure,
    StreamState,
    TruncatedBodyError,
    TruncatedHeaderError,
    WriteFailure,
    encode_header,
)


class FakeWriter:
    """Collects written bytes like a StreamWriter."""

    def __init__(self, fail_drain: bool = False) -> None:
        self.data = bytearray()
        self.writes = 0
        self.fail_drain = fail_drain

    def write(self, data: bytes) -> None:
        self.writes += 1
        self.data += data

    async def drain(self) -> None:
        if self.fail_drain:
            raise ConnectionResetError("peer went away")


class BrokenReader:
    """Reader whose reads always fail."""

    def __init__(self) -> None:
        self.reads = 0

    async def readexactly(self, n: int) -> bytes:
        self.reads += 1
        raise ConnectionResetError("peer went away")


class Payload(bytearray):
    """Payload type that supports weak references."""


def make_reader(data: bytes) -> asyncio.StreamReader:
    """Create a reader holding ``data`` followed by EOF."""
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


class TestAsyncNetstrEncoder:
    """Test the asyncio encoder."""

    def test_encode(self):
        """Test frames are written header first."""

        async def run():
            writer = FakeWriter()
            encoder = AsyncNetstrEncoder(writer)
            assert await encoder.encode(b"hello") == 6
            assert await encoder.encode(b"") == 1
            return bytes(writer.data)

        assert asyncio.run(run()) == b"\x05hello\x00"

    def test_sticky_failure(self):
        """Test a failed drain is repeated without writing again."""

        async def run():
            writer = FakeWriter(fail_drain=True)
            encoder = AsyncNetstrEncoder(writer)

            with pytest.raises(WriteFailure) as first:
                await encoder.encode(b"hello")
            writes = writer.writes

            with pytest.raises(WriteFailure) as second:
                await encoder.encode(b"again")

            assert second.value is first.value
            assert writer.writes == writes
            assert encoder.state is StreamState.FAILED

            encoder.reset(FakeWriter())
            assert encoder.state is StreamState.ACTIVE
            assert encoder.error is None

        asyncio.run(run())

    def test_failure_does_not_accumulate(self):
        """Test repeated failures keep a fixed traceback and drop payloads."""

        async def run():
            encoder = AsyncNetstrEncoder(FakeWriter(fail_drain=True))
            depths = []
            refs = []
            for _ in range(100):
                payload = Payload(b"hello")
                refs.append(weakref.ref(payload))
                with pytest.raises(WriteFailure) as info:
                    await encoder.encode(payload)
                depths.append(len(traceback.extract_tb(info.value.__traceback__)))

            del payload, info
            gc.collect()
            assert len(set(depths[1:])) == 1
            assert all(ref() is None for ref in refs)

        asyncio.run(run())


class TestAsyncNetstrDecoder:
    """Test the asyncio decoder."""

    def test_round_trip(self):
        """Test frames written by the encoder are read back in order."""
        payloads = [b"foo", b"hello, world", b"", b"z" * 5000]

        async def run():
            writer = FakeWriter()
            encoder = AsyncNetstrEncoder(writer)
            for payload in payloads:
                await encoder.encode(payload)

            decoder = AsyncNetstrDecoder(make_reader(bytes(writer.data)), read_size=512)
            return [frame async for frame in decoder]

        assert asyncio.run(run()) == payloads

    def test_end_of_stream_is_idempotent(self):
        """Test end of stream is sticky."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b"\x02hi"))
            assert await decoder.decode() == b"hi"
            for _ in range(3):
                with pytest.raises(EndOfStream):
                    await decoder.decode()
            assert decoder.state is StreamState.ENDED

        asyncio.run(run())

    def test_truncated_header(self):
        """Test input ending inside the header."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b"\x80\x80"))
            with pytest.raises(TruncatedHeaderError):
                await decoder.decode()

        asyncio.run(run())

    def test_truncated_body(self):
        """Test input ending inside the body."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(encode_header(12) + b"hello"))
            with pytest.raises(TruncatedBodyError):
                await decoder.decode()
            with pytest.raises(TruncatedBodyError):
                await decoder.decode()
            assert decoder.state is StreamState.FAILED

        asyncio.run(run())

    def test_max_frame_size(self):
        """Test oversized frames are rejected."""

        async def run():
            decoder = AsyncNetstrDecoder(
                make_reader(encode_header(100) + b"x" * 100), max_frame_size=10
            )
            with pytest.raises(FrameTooLargeError):
                await decoder.decode()

        asyncio.run(run())

    def test_read_failure_is_sticky(self):
        """Test a failing reader is not read again."""

        async def run():
            reader = BrokenReader()
            decoder = AsyncNetstrDecoder(reader)
            with pytest.raises(ReadFailure):
                await decoder.decode()
            with pytest.raises(ReadFailure):
                await decoder.decode()
            assert reader.reads == 1

        asyncio.run(run())

    def test_reset(self):
        """Test reset rebinds the reader after end of stream."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b""))
            with pytest.raises(EndOfStream):
                await decoder.decode()

            decoder.reset(make_reader(b"\x03foo"))
            return await decoder.decode()

        assert asyncio.run(run()) == b"foo"

    def test_header_overflow(self):
        """Test ten continuation bytes are rejected."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b"\xff" * 10 + b"payload"))
            with pytest.raises(HeaderOverflowError):
                await decoder.decode()

        asyncio.run(run())

    def test_iteration_raises_parse_errors(self):
        """Test async iteration stops on end of stream but not on errors."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b"\x03foo\x05ab"))
            frames = []
            with pytest.raises(TruncatedBodyError):
                async for frame in decoder:
                    frames.append(frame)
            return frames

        assert asyncio.run(run()) == [b"foo"]

    def test_repeated_end_of_stream_does_not_accumulate(self):
        """Test the stored end of stream keeps a fixed traceback length."""

        async def run():
            decoder = AsyncNetstrDecoder(make_reader(b""))
            depths = []
            for _ in range(100):
                with pytest.raises(EndOfStream) as info:
                    await decoder.decode()
                depths.append(len(traceback.extract_tb(info.value.__traceback__)))
            assert len(set(depths[1:])) == 1

        asyncio.run(run())
