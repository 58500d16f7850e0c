"""Minute-bar OHLCV aggregation."""

from __future__ import annotations

import math

from marketsim.engine.hashing import MASK32, mix2, symbol_seed
from marketsim.engine.kernel import check_base_price, check_symbol, price_at_second
from marketsim.engine.noise import CHANNEL_DAY_VOLUME, CHANNEL_MINUTE_VOLUME
from marketsim.exceptions import InvalidArgumentError
from marketsim.types import Bar

MINUTES_PER_SESSION = 390
LAST_MINUTE = MINUTES_PER_SESSION - 1

# Seconds within a minute at which the price kernel is sampled
SAMPLE_OFFSETS = (0, 12, 24, 36, 48, 59)

# Volume model constants, kept exactly as tuned
DAY_VOLUME_MIN = 80000
DAY_VOLUME_SPAN = 120000
MINUTE_NOISE_MIN = 0.5
MINUTE_NOISE_SPAN = 1.5
OPEN_BIAS_WEIGHT = 2.5
OPEN_BIAS_DECAY = 40
CLOSE_BIAS_WEIGHT = 2.0
CLOSE_BIAS_DECAY = 25


def check_minute(minute_idx: int) -> int:
    """Reject minute indices outside the session.

    :raises InvalidArgumentError: If ``minute_idx`` is not in 0..389.
    """
    if not 0 <= minute_idx <= LAST_MINUTE:
        raise InvalidArgumentError(
            f"Minute index must be in 0..{LAST_MINUTE}, got {minute_idx}"
        )
    return minute_idx


def minute_volume(symbol: str, day: int, minute_idx: int) -> int:
    """Volume traded during one minute.

    A per-day base magnitude times a per-minute multiplier, shaped by decaying
    biases near the open and the close (U-shaped across the session).

    :param symbol: Ticker symbol.
    :param day: Trading day.
    :param minute_idx: Minute of the session (0..389).
    :returns: Positive integer volume.
    """
    check_symbol(symbol)
    check_minute(minute_idx)
    seed = symbol_seed(symbol)

    base_vol = DAY_VOLUME_MIN + mix2((seed ^ CHANNEL_DAY_VOLUME) & MASK32, day) * DAY_VOLUME_SPAN
    m_noise = MINUTE_NOISE_MIN + mix2(
        (seed ^ CHANNEL_MINUTE_VOLUME) & MASK32, day * 400 + minute_idx
    ) * MINUTE_NOISE_SPAN
    open_bias = math.exp(-minute_idx / OPEN_BIAS_DECAY) * OPEN_BIAS_WEIGHT
    close_bias = math.exp(-(LAST_MINUTE - minute_idx) / CLOSE_BIAS_DECAY) * CLOSE_BIAS_WEIGHT
    return math.floor(base_vol * m_noise * (1 + open_bias + close_bias) / MINUTES_PER_SESSION)


def minute_bar(
    symbol: str,
    base_price: float,
    day: int,
    minute_idx: int,
    today: int | None = None,
) -> Bar:
    """OHLCV for a 1-minute bar, sampled at six seconds within the minute.

    :param symbol: Ticker symbol.
    :param base_price: Today's reference price.
    :param day: Trading day.
    :param minute_idx: 0 = 9:30-9:31 AM ... 389 = 3:59-4:00 PM.
    :param today: Day on which ``base_price`` is exact; defaults to ``day``.
    :returns: Bar with ``low <= open, close <= high``.
    """
    check_base_price(base_price)
    check_minute(minute_idx)

    start_sec = minute_idx * 60
    samples = [
        price_at_second(symbol, base_price, day, start_sec + offset, today)
        for offset in SAMPLE_OFFSETS
    ]
    return Bar(
        open=samples[0],
        high=max(samples),
        low=min(samples),
        close=samples[-1],
        volume=minute_volume(symbol, day, minute_idx),
    )
