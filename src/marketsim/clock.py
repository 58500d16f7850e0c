"""Clock sources and the simulated market state.

The simulator never reads the wall clock on its own. Callers pass a
:class:`Clock`, and :func:`market_state` maps its local time-of-day onto the
9:30 AM - 4:00 PM session of a fixed simulated trading day.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, time

from marketsim.calendar import SIMULATED_DAY
from marketsim.engine.kernel import MARKET_DURATION
from marketsim.exceptions import InvalidArgumentError
from marketsim.types import MarketState

MARKET_OPEN_SEC = 9 * 3600 + 30 * 60  # 34200 s (9:30 AM local)
MARKET_CLOSE_SEC = 16 * 3600  # 57600 s (4:00 PM local)


class Clock(ABC):
    """Abstract source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current local time.

        :returns: Datetime whose wall-clock fields are local time.
        """
        pass


class SystemClock(Clock):
    """Clock backed by the machine's local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """Clock frozen at a given moment, for tests and replay.

    :param moment: Time returned by :meth:`now`.
    """

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    @classmethod
    def at_time_of_day(cls, seconds: int, on: date | None = None) -> FixedClock:
        """Clock frozen at ``seconds`` past local midnight.

        :param seconds: Seconds since midnight (0-86399).
        :param on: Calendar date; defaults to 2026-02-21.
        :raises InvalidArgumentError: If ``seconds`` is outside one day.
        """
        if not 0 <= seconds < 86400:
            raise InvalidArgumentError(f"Time of day out of range: {seconds}")
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        return cls(datetime.combine(on or date(2026, 2, 21), time(hours, minutes, secs)))

    def set_moment(self, moment: datetime) -> None:
        """Move the clock to a new moment."""
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


def parse_time_of_day(value: str) -> int:
    """Parse ``"HH:MM"`` or ``"HH:MM:SS"`` into seconds since midnight.

    :raises InvalidArgumentError: If the string is not a valid time of day.
    """
    try:
        parsed = time.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid time of day: {value!r}") from e
    return parsed.hour * 3600 + parsed.minute * 60 + parsed.second


def market_state(clock: Clock, simulated_day: int = SIMULATED_DAY) -> MarketState:
    """Current position within the simulated session.

    Before 9:30 AM the session is shown as just opened, after 4:00 PM as
    complete. The simulated day is always treated as a trading day.

    :param clock: Time source.
    :param simulated_day: Trading day the session belongs to.
    :returns: Market state with ``seconds_since_open`` in [0, 23400].
    """
    now = clock.now()
    local_sec = now.hour * 3600 + now.minute * 60 + now.second

    if local_sec < MARKET_OPEN_SEC:
        market_sec, is_open = 0, False
    elif local_sec >= MARKET_CLOSE_SEC:
        market_sec, is_open = MARKET_DURATION, False
    else:
        market_sec, is_open = local_sec - MARKET_OPEN_SEC, True

    return MarketState(
        trading_day=simulated_day,
        seconds_since_open=market_sec,
        is_open=is_open,
        unix_sec=int(now.timestamp()),
    )


def elapsed_label(state: MarketState) -> str:
    """Human-readable position in the session.

    :returns: ``"Pre-market"``, ``"Market closed"`` or e.g. ``"2h 05m since open"``.
    """
    if not state.is_open:
        return "Pre-market" if state.seconds_since_open == 0 else "Market closed"
    hours, minutes = divmod(state.seconds_since_open // 60, 60)
    return f"{hours}h {minutes:02d}m since open"
