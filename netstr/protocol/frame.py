"""Netstring frame payload type."""

from .exceptions import NetstrDecodingError
from .tokenizer import split
from .varint import encode_header


class Frame(bytes):
    """An immutable netstring payload.

    Frames returned by decoders are independent copies of the input and
    may be kept after the next decode call.
    """

    __slots__ = ()

    @property
    def header(self) -> bytes:
        """Encoded length prefix of this frame."""
        return encode_header(len(self))

    def encode(self) -> bytes:
        """Return the wire form: header followed by payload."""
        return self.header + self

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the payload as text."""
        return self.decode(encoding)

    @classmethod
    def from_wire(cls, data: bytes | bytearray | memoryview) -> "Frame":
        """
        Parse exactly one encoded frame.

        Args:
            data: Header and payload, with nothing before or after

        Returns:
            Decoded frame

        Raises:
            NetstrDecodingError: If data is malformed or has trailing bytes
        """
        consumed, payload = split(data, at_eof=True)
        if consumed != len(data):
            raise NetstrDecodingError(
                f"Expected message of {len(data)} bytes, got {consumed}"
            )
        with payload:
            return cls(payload)

    def __repr__(self) -> str:
        return f"Frame({bytes.__repr__(self)})"
