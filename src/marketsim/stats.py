"""Derived market statistics.

Every statistic is recomputed from scratch on each call, so results do not
depend on how often they are requested.
"""

from __future__ import annotations

from marketsim.calendar import previous_trading_day
from marketsim.clock import elapsed_label
from marketsim.engine.bars import LAST_MINUTE, minute_bar, minute_volume
from marketsim.engine.kernel import check_market_second, price_at_second
from marketsim.series import current_minute
from marketsim.types import MarketState, Quote, Symbol

RANGE_SAMPLE_SECONDS = 300


def previous_close(symbol: str, base_price: float, day: int) -> float:
    """Closing price of the most recent trading day before ``day``."""
    prev_day = previous_trading_day(day)
    return minute_bar(symbol, base_price, prev_day, LAST_MINUTE, today=day).close


def today_open(symbol: str, base_price: float, day: int) -> float:
    """Price at the first second of the session."""
    return price_at_second(symbol, base_price, day, 0)


def day_range(symbol: str, base_price: float, day: int, market_sec: int) -> tuple[float, float]:
    """Lowest and highest 5-minute samples from the open to ``market_sec``.

    :returns: ``(low, high)``.
    """
    check_market_second(market_sec)
    samples = [
        price_at_second(symbol, base_price, day, s)
        for s in range(0, market_sec + 1, RANGE_SAMPLE_SECONDS)
    ]
    return min(samples), max(samples)


def format_day_range(low: float, high: float) -> str:
    """``"187.35 - 189.26"``."""
    return f"{low:.2f} - {high:.2f}"


def day_volume(symbol: str, day: int, market_sec: int) -> int:
    """Cumulative volume from the open through the current minute."""
    check_market_second(market_sec)
    return sum(minute_volume(symbol, day, m) for m in range(current_minute(market_sec) + 1))


def build_quote(symbol: str, base_price: float, state: MarketState) -> Quote:
    """Summary statistics for ``symbol`` at ``state``.

    :param symbol: Ticker symbol.
    :param base_price: Reference price for the state's trading day.
    :param state: Current market state.
    :returns: Quote with change figures relative to the previous close.
    """
    day = state.trading_day
    sec = state.seconds_since_open

    price = price_at_second(symbol, base_price, day, sec)
    prev = previous_close(symbol, base_price, day)
    low, high = day_range(symbol, base_price, day, sec)

    return Quote(
        symbol=Symbol(symbol),
        price=price,
        previous_close=prev,
        change=round(price - prev, 2),
        change_percent=round((price - prev) / prev * 100, 2),
        open=today_open(symbol, base_price, day),
        day_low=low,
        day_high=high,
        volume=day_volume(symbol, day, sec),
        as_of=elapsed_label(state),
    )
