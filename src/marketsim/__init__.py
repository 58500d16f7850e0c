"""Deterministic procedural market-data simulator."""

from marketsim.exceptions import (
    ConfigError,
    InvalidArgumentError,
    MarketSimError,
    StorageError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "InvalidArgumentError",
    "MarketSimError",
    "StorageError",
    "__version__",
]
