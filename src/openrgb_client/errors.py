"""Exception hierarchy for the OpenRGB SDK client.

Every failure surfaced by the codecs or the session derives from
``OpenRGBError``.  None of these are retried internally; a session that
raises one of them while talking to the server is no longer usable.
"""
from __future__ import annotations


class OpenRGBError(Exception):
    """Base class for all client errors."""


class TransportError(OpenRGBError):
    """Underlying stream I/O failed (socket error, peer closed mid-frame)."""


class ProtocolMismatch(OpenRGBError):
    """Frame header magic did not match the protocol constant."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"bad packet magic: {magic:#010x}")


class UnknownCommand(OpenRGBError):
    """Command id is not part of the registry."""

    def __init__(self, command_id: int):
        self.command_id = command_id
        super().__init__(f"invalid command id: {command_id}")


class MalformedText(OpenRGBError):
    """Length-prefixed text was not valid UTF-8."""


class LengthMismatch(OpenRGBError):
    """Declared lengths disagree with each other or with the data."""


class UnexpectedEndOfData(LengthMismatch):
    """A read ran past the end of the buffered frame body."""


class UnexpectedVariant(OpenRGBError):
    """A packet of a different shape than requested came off the wire."""

    def __init__(self, expected: type, actual: object):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected {expected.__name__}, got {type(actual).__name__}"
        )


class EncodeError(OpenRGBError, ValueError):
    """A value cannot be represented in its wire field."""


class SessionClosed(OpenRGBError):
    """Session was closed or invalidated by an earlier fatal error."""
