"""Procedural price kernel.

Prices are layered smooth noise at four frequencies plus a gentle intraday
trend arc, added to a per-day opening price. The opening price of past days is
a seeded random walk backward from today's reference price, so history is
consistent without being stored.
"""

from __future__ import annotations

import math
from functools import lru_cache

from marketsim.engine.hashing import MASK32, signed_mix2, symbol_seed
from marketsim.engine.noise import (
    CHANNEL_DAY_WALK,
    CHANNEL_HOUR,
    CHANNEL_MINUTE,
    CHANNEL_TEN_MINUTE,
    CHANNEL_TEN_SECOND,
    smooth_noise,
)
from marketsim.exceptions import InvalidArgumentError
from marketsim.types import PricePoint

MARKET_DURATION = 23400  # 6.5 hours in seconds

# Day multiplier of the absolute time coordinate; must exceed MARKET_DURATION.
TIME_STRIDE = 30000

DAILY_DRIFT = 0.015
BASE_VOLATILITY = 0.012
TREND_WEIGHT = 0.6
INTRADAY_FLOOR = 0.9
WALK_RESET = 0.3
WALK_FLOOR = 0.1

# (channel, period in seconds, weight relative to base volatility), coarse -> fine
NOISE_LAYERS = (
    (CHANNEL_HOUR, 3600, 1.00),
    (CHANNEL_TEN_MINUTE, 600, 0.55),
    (CHANNEL_MINUTE, 60, 0.30),
    (CHANNEL_TEN_SECOND, 10, 0.15),
)


def check_symbol(symbol: str) -> str:
    """Reject empty or non-string symbols.

    :raises InvalidArgumentError: If the symbol is unusable.
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidArgumentError(f"Symbol must be a non-empty string, got {symbol!r}")
    return symbol


def check_base_price(base_price: float) -> float:
    """Reject non-positive or non-finite reference prices.

    :raises InvalidArgumentError: If the price is unusable.
    """
    if (
        isinstance(base_price, bool)
        or not isinstance(base_price, (int, float))
        or not math.isfinite(base_price)
        or base_price <= 0
    ):
        raise InvalidArgumentError(
            f"Base price must be a positive finite number, got {base_price!r}"
        )
    return float(base_price)


def check_market_second(market_sec: int) -> int:
    """Reject negative market seconds.

    :raises InvalidArgumentError: If the second is negative.
    """
    if market_sec < 0:
        raise InvalidArgumentError(f"Market second must be non-negative, got {market_sec}")
    return market_sec


def time_coordinate(day: int, market_sec: int) -> int:
    """Absolute time coordinate of a second within a trading day."""
    return day * TIME_STRIDE + max(0, market_sec)


@lru_cache(maxsize=8192)
def day_open_price(seed: int, base_price: float, day: int, today: int) -> float:
    """Reference opening price for ``day``.

    Walks backward from ``today``, undoing one day of seeded +/-1.5% drift per
    step. The result is floored at 10% of ``base_price``.

    :param seed: Per-symbol seed.
    :param base_price: Today's reference price.
    :param day: Target trading day.
    :param today: Day on which ``base_price`` is exact.
    :returns: Opening price for ``day``.
    """
    if day >= today:
        return base_price

    key = (seed ^ CHANNEL_DAY_WALK) & MASK32
    price = base_price
    for d in range(today, day, -1):
        r = signed_mix2(key, d)
        price /= 1 + r * DAILY_DRIFT
        if price <= 0:
            price = base_price * WALK_RESET
    return max(price, base_price * WALK_FLOOR)


def price_at_second(
    symbol: str,
    base_price: float,
    day: int,
    market_sec: int,
    today: int | None = None,
) -> float:
    """Procedurally generated price at one second of a trading day.

    All layers are bounded, so the intraday range is roughly +/-2% of the
    day's opening price.

    :param symbol: Ticker symbol.
    :param base_price: Today's reference price.
    :param day: Trading day (days since epoch).
    :param market_sec: Seconds since 9:30 AM (0 = open, 23400 = close).
    :param today: Day on which ``base_price`` is exact; defaults to ``day``.
    :returns: Price rounded to 2 decimal places.
    :raises InvalidArgumentError: On an empty symbol, bad price or negative second.
    """
    check_symbol(symbol)
    base_price = check_base_price(base_price)
    check_market_second(market_sec)

    seed = symbol_seed(symbol)
    day_open = day_open_price(seed, base_price, day, day if today is None else today)

    t = time_coordinate(day, market_sec)
    vol = day_open * BASE_VOLATILITY

    price = day_open
    for channel, period, weight in NOISE_LAYERS:
        price += smooth_noise(seed, channel, t, period) * vol * weight

    # Slight upward drift in the morning that levels off by the close
    day_frac = market_sec / MARKET_DURATION
    price += vol * TREND_WEIGHT * math.sin(day_frac * math.pi)

    return max(round(price, 2), day_open * INTRADAY_FLOOR)


def price_point(
    symbol: str,
    base_price: float,
    day: int,
    market_sec: int,
    today: int | None = None,
) -> PricePoint:
    """:func:`price_at_second` wrapped as a :class:`PricePoint`."""
    return PricePoint(
        second=market_sec,
        price=price_at_second(symbol, base_price, day, market_sec, today),
    )
