"""Tests for derived market statistics."""

from datetime import datetime

from marketsim.clock import FixedClock, market_state
from marketsim.engine.kernel import price_at_second
from marketsim.stats import (
    build_quote,
    day_range,
    day_volume,
    format_day_range,
    previous_close,
    today_open,
)

TODAY = 20505


class TestReferenceValues:
    """Statistics match recorded values."""

    def test_previous_close(self) -> None:
        assert previous_close("AAPL", 187.5, TODAY) == 190.21

    def test_day_range(self) -> None:
        low, high = day_range("AAPL", 187.5, TODAY, 3600)
        assert format_day_range(low, high) == "187.35 - 189.26"

    def test_day_volume(self) -> None:
        assert day_volume("AAPL", TODAY, 3600) == 73203

    def test_today_open(self) -> None:
        assert today_open("AAA", 100.0, TODAY) == 99.29


class TestDayRange:
    """Tests for day_range."""

    def test_at_open_single_sample(self) -> None:
        """At the open the range collapses to the opening price."""
        low, high = day_range("AAPL", 187.5, TODAY, 0)
        assert low == high == today_open("AAPL", 187.5, TODAY)

    def test_widens_over_time(self) -> None:
        """The range never shrinks as the session advances."""
        prev_low, prev_high = day_range("MSFT", 410.0, TODAY, 0)
        for sec in range(300, 23401, 3000):
            low, high = day_range("MSFT", 410.0, TODAY, sec)
            assert low <= prev_low
            assert high >= prev_high
            prev_low, prev_high = low, high


class TestDayVolume:
    """Tests for day_volume."""

    def test_monotonic(self) -> None:
        """Cumulative volume never decreases as the minute advances."""
        volumes = [day_volume("SPY", TODAY, m * 60) for m in range(0, 390, 10)]
        assert volumes == sorted(volumes)
        assert all(v > 0 for v in volumes)

    def test_after_close_counts_whole_session(self) -> None:
        """Seconds past the close do not add a phantom minute."""
        assert day_volume("SPY", TODAY, 23400) == day_volume("SPY", TODAY, 23399)

    def test_recomputation_is_stable(self) -> None:
        """Repeated calls return identical totals."""
        assert day_volume("SPY", TODAY, 5000) == day_volume("SPY", TODAY, 5000)


class TestBuildQuote:
    """Tests for build_quote."""

    def test_quote_fields(self) -> None:
        """Quote combines the individual statistics."""
        state = market_state(FixedClock(datetime(2026, 2, 21, 10, 30)))
        quote = build_quote("AAPL", 187.5, state)

        price = price_at_second("AAPL", 187.5, TODAY, 3600)
        assert quote.symbol == "AAPL"
        assert quote.price == price
        assert quote.previous_close == 190.21
        assert quote.change == round(price - 190.21, 2)
        assert quote.change_percent == round((price - 190.21) / 190.21 * 100, 2)
        assert quote.day_range == "187.35 - 189.26"
        assert quote.volume == 73203
        assert quote.as_of == "1h 00m since open"
