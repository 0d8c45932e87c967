"""Netstring framing exceptions."""


class NetstrError(Exception):
    """Base exception for netstring framing errors."""

    pass


class NetstrDecodingError(NetstrError):
    """Raised when a frame cannot be parsed from the input."""

    pass


class TruncatedHeaderError(NetstrDecodingError):
    """Raised when input ends before the length header is complete."""

    pass


class TruncatedBodyError(NetstrDecodingError):
    """Raised when input ends before the declared payload length."""

    pass


class HeaderOverflowError(NetstrDecodingError):
    """Raised when the length header does not fit in 64 bits."""

    pass


class FrameTooLargeError(NetstrDecodingError):
    """Raised when a declared payload length exceeds the configured limit."""

    pass


class NetstrIOError(NetstrError):
    """Base class for wrapped sink/source failures."""

    pass


class ReadFailure(NetstrIOError):
    """Raised when the underlying source fails."""

    pass


class WriteFailure(NetstrIOError):
    """Raised when the underlying sink fails."""

    pass


class EndOfStream(NetstrError, EOFError):
    """Raised when the stream ended cleanly on a frame boundary.

    This is a terminal condition, not a failure.
    """

    pass
