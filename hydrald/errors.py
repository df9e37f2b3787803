"""
Exceptions raised by hydrald.

Errors raised by the output stream or by user metadata hooks are not
wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations


class HydraError(Exception):
    """Base class for all hydrald errors."""

    pass


class WriterError(HydraError):
    """Raised when the JSON writer is used in an invalid state."""

    pass


class ContextStackError(HydraError):
    """Raised when the context stack does not match the emission in progress."""

    pass


class SerializationError(HydraError):
    """Raised when a value cannot be serialized."""

    pass


class ConfigError(HydraError):
    """Raised when configuration is invalid."""

    pass
