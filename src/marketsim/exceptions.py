"""Market simulator exception hierarchy.

All simulator-specific exceptions derive from :class:`MarketSimError` so callers
can catch every simulator error uniformly.
"""

from __future__ import annotations


class MarketSimError(Exception):
    """Base class for simulator exceptions.

    Derived exceptions should extend this class so that callers can catch all
    simulator-specific errors uniformly.
    """


class ConfigError(MarketSimError):
    """Raised when configuration files or parameters are invalid."""


class InvalidArgumentError(MarketSimError, ValueError):
    """Raised when a caller passes a value outside an operation's domain.

    Examples are an empty symbol, a non-positive reference price or a negative
    market second.
    """


class StorageError(MarketSimError):
    """Raised when writing generated series to disk fails."""


__all__ = [
    "MarketSimError",
    "ConfigError",
    "InvalidArgumentError",
    "StorageError",
]
