"""Stream state machine shared by encoders and decoders."""

from enum import Enum


class StreamState(Enum):
    """Lifecycle of an encoder or decoder.

    Transitions only move forward (ACTIVE -> FAILED or ACTIVE -> ENDED);
    ``reset()`` is the only way back to ACTIVE.
    """

    ACTIVE = "active"
    FAILED = "failed"
    ENDED = "ended"
