from __future__ import annotations


class RelayError(Exception):
    """Base class for errors raised by the relay service."""


class RelayConfigurationError(RelayError):
    pass


class RecordDecodeError(RelayError):
    """Raised when an event payload cannot be decoded into a record."""


class StreamClosedError(RelayError):
    pass


class InvalidValueError(RelayError, ValueError):
    """Raised by a transformation that rejects its input record."""
