"""Trading-day calendar and axis labels.

Trading days are integer day counts since 1970-01-01 (UTC). Saturdays and
Sundays are never trading days; holidays are not modeled.
"""

from __future__ import annotations

from datetime import date, timedelta

from marketsim.exceptions import InvalidArgumentError
from marketsim.types import TradingDay

EPOCH = date(1970, 1, 1)

SESSION_OPEN_MINUTE = 9 * 60 + 30  # 9:30 AM

# Long weekends are bridged by looking at most this many days back
MAX_PREVIOUS_DAY_SKIP = 5


def day_number(value: date) -> TradingDay:
    """Days since the epoch for a calendar date."""
    return TradingDay((value - EPOCH).days)


def date_for_day(day: int) -> date:
    """Calendar date of a day number."""
    return EPOCH + timedelta(days=day)


def is_trading_day(day: int) -> bool:
    """True unless ``day`` falls on a Saturday or Sunday."""
    return date_for_day(day).weekday() < 5


def enumerate_trading_days(count: int, before: int) -> list[TradingDay]:
    """The ``count`` most recent trading days strictly before ``before``.

    :param count: Number of days to collect.
    :param before: Exclusive upper bound.
    :returns: Trading days, oldest first.
    :raises InvalidArgumentError: If ``count`` is negative.
    """
    if count < 0:
        raise InvalidArgumentError(f"Day count must be non-negative, got {count}")

    days: list[TradingDay] = []
    d = before
    while len(days) < count:
        d -= 1
        if is_trading_day(d):
            days.append(TradingDay(d))
    days.reverse()
    return days


def previous_trading_day(day: int) -> TradingDay:
    """Most recent trading day before ``day``, skipping up to five days back."""
    prev = day - 1
    for _ in range(MAX_PREVIOUS_DAY_SKIP):
        if is_trading_day(prev):
            break
        prev -= 1
    return TradingDay(prev)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def format_minute_time(minute_idx: int) -> str:
    """``"9:30 AM"``, ``"12:00 PM"``, ... for a session minute (0-389)."""
    total = SESSION_OPEN_MINUTE + minute_idx
    hour, minute = divmod(total, 60)
    ampm = "AM" if hour < 12 else "PM"
    hour12 = hour - 12 if hour > 12 else hour
    return f"{hour12}:{minute:02d} {ampm}"


def format_date(day: int) -> str:
    """``"01/17"`` for a day number."""
    return date_for_day(day).strftime("%m/%d")


def format_datetime(day: int, minute_idx: int) -> str:
    """``"01/13 9:30 AM"`` for a day number and session minute."""
    return f"{format_date(day)} {format_minute_time(minute_idx)}"


# Default simulated "today": pins generated history regardless of the wall clock
SIMULATED_DAY = day_number(date(2026, 2, 21))
