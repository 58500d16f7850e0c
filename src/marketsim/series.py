"""Chart series generators.

Each generator is a pure re-derivation from (symbol, base price, day, market
second); nothing is accumulated between calls. ``day`` is the current trading
day and the day on which ``base_price`` is exact.
"""

from __future__ import annotations

import logging

from marketsim.calendar import enumerate_trading_days, format_date, format_datetime, format_minute_time
from marketsim.engine.bars import LAST_MINUTE, minute_bar
from marketsim.engine.kernel import check_base_price, check_market_second, check_symbol
from marketsim.exceptions import InvalidArgumentError
from marketsim.types import Series, SeriesPoint, Symbol, Timeframe

logger = logging.getLogger(__name__)

HOURLY_PRIOR_DAYS = 4
HOURLY_MINUTES = (0, 60, 120, 180, 240, 300, 360)
DAILY_PRIOR_DAYS = 22


def current_minute(market_sec: int) -> int:
    """Session minute containing ``market_sec``, capped at the last minute."""
    return min(market_sec // 60, LAST_MINUTE)


def _point(
    symbol: str,
    base_price: float,
    day: int,
    minute_idx: int,
    today: int,
    label: str,
) -> SeriesPoint:
    bar = minute_bar(symbol, base_price, day, minute_idx, today)
    return SeriesPoint(label=label, day=day, minute_idx=minute_idx, **bar.model_dump())


def _validate(symbol: str, base_price: float, market_sec: int) -> float:
    check_symbol(symbol)
    check_market_second(market_sec)
    return check_base_price(base_price)


def intraday_series(symbol: str, base_price: float, day: int, market_sec: int) -> Series:
    """One bar per completed minute since the open.

    :param symbol: Ticker symbol.
    :param base_price: Reference price for ``day``.
    :param day: Current trading day.
    :param market_sec: Seconds since 9:30 AM.
    :returns: Intraday series, minutes 0..min(floor(market_sec / 60), 389).
    """
    base_price = _validate(symbol, base_price, market_sec)
    points = [
        _point(symbol, base_price, day, m, day, format_minute_time(m))
        for m in range(current_minute(market_sec) + 1)
    ]
    logger.debug("Generated intraday series for %s: %d points", symbol, len(points))
    return Series(
        symbol=Symbol(symbol),
        base_price=base_price,
        timeframe=Timeframe.INTRADAY,
        day=day,
        points=points,
    )


def multi_day_hourly_series(symbol: str, base_price: float, day: int, market_sec: int) -> Series:
    """Seven hourly samples per day over the last four trading days plus today.

    Today's samples stop at the current minute (no future data).
    """
    base_price = _validate(symbol, base_price, market_sec)
    days = enumerate_trading_days(HOURLY_PRIOR_DAYS, day)
    days.append(day)
    minute_now = market_sec // 60

    points: list[SeriesPoint] = []
    for d in days:
        for m in HOURLY_MINUTES:
            if d == day and m > minute_now:
                break
            points.append(_point(symbol, base_price, d, m, day, format_datetime(d, m)))

    logger.debug("Generated multi-day hourly series for %s: %d points", symbol, len(points))
    return Series(
        symbol=Symbol(symbol),
        base_price=base_price,
        timeframe=Timeframe.MULTI_DAY_HOURLY,
        day=day,
        points=points,
    )


def multi_day_daily_series(symbol: str, base_price: float, day: int, market_sec: int) -> Series:
    """Closing bars of the last 22 trading days plus today's current bar."""
    base_price = _validate(symbol, base_price, market_sec)
    points = [
        _point(symbol, base_price, d, LAST_MINUTE, day, format_date(d))
        for d in enumerate_trading_days(DAILY_PRIOR_DAYS, day)
    ]
    points.append(
        _point(symbol, base_price, day, current_minute(market_sec), day, format_date(day))
    )

    logger.debug("Generated multi-day daily series for %s: %d points", symbol, len(points))
    return Series(
        symbol=Symbol(symbol),
        base_price=base_price,
        timeframe=Timeframe.MULTI_DAY_DAILY,
        day=day,
        points=points,
    )


_GENERATORS = {
    Timeframe.INTRADAY: intraday_series,
    Timeframe.MULTI_DAY_HOURLY: multi_day_hourly_series,
    Timeframe.MULTI_DAY_DAILY: multi_day_daily_series,
}


def generate_series(
    timeframe: Timeframe | str,
    symbol: str,
    base_price: float,
    day: int,
    market_sec: int,
) -> Series:
    """Generate a series of the requested shape.

    :param timeframe: :class:`Timeframe` or its string value.
    :raises InvalidArgumentError: If the timeframe is unknown.
    """
    try:
        timeframe = Timeframe(timeframe)
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown timeframe '{timeframe}'. "
            f"Valid options: {[t.value for t in Timeframe]}"
        ) from e
    return _GENERATORS[timeframe](symbol, base_price, day, market_sec)
