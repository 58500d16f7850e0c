"""Deterministic price engine: hashing, noise, price kernel and minute bars."""

from marketsim.engine.bars import LAST_MINUTE, MINUTES_PER_SESSION, minute_bar, minute_volume
from marketsim.engine.hashing import mix2, symbol_seed
from marketsim.engine.kernel import (
    MARKET_DURATION,
    day_open_price,
    price_at_second,
    price_point,
    time_coordinate,
)
from marketsim.engine.noise import smooth_noise, smoothstep

__all__ = [
    # Hashing
    "mix2",
    "symbol_seed",
    # Noise
    "smooth_noise",
    "smoothstep",
    # Kernel
    "MARKET_DURATION",
    "day_open_price",
    "price_at_second",
    "price_point",
    "time_coordinate",
    # Bars
    "LAST_MINUTE",
    "MINUTES_PER_SESSION",
    "minute_bar",
    "minute_volume",
]
