"""Tests for the price kernel.

Recorded values were generated with today pinned to
2026-02-21 (day 20505).
"""

import math

import pytest

from marketsim.engine.hashing import symbol_seed
from marketsim.engine.kernel import (
    BASE_VOLATILITY,
    MARKET_DURATION,
    TIME_STRIDE,
    day_open_price,
    price_at_second,
    price_point,
    time_coordinate,
)
from marketsim.exceptions import InvalidArgumentError

TODAY = 20505


class TestTimeCoordinate:
    """Tests for time_coordinate."""

    def test_no_aliasing_between_days(self) -> None:
        """The last second of a day never reaches the first second of the next."""
        assert time_coordinate(10, MARKET_DURATION) < time_coordinate(11, 0)
        assert TIME_STRIDE > MARKET_DURATION

    def test_negative_second_clamps_to_open(self) -> None:
        """Negative seconds map to the open."""
        assert time_coordinate(5, -30) == time_coordinate(5, 0)


class TestDayOpenPrice:
    """Tests for day_open_price."""

    def test_today_pass_through(self) -> None:
        """Today's open is the base price exactly."""
        assert day_open_price(symbol_seed("AAPL"), 187.5, TODAY, TODAY) == 187.5

    def test_future_day_pass_through(self) -> None:
        """Days after today also use the base price."""
        assert day_open_price(symbol_seed("AAPL"), 187.5, TODAY + 3, TODAY) == 187.5

    @pytest.mark.parametrize(
        ("days_back", "expected"),
        [(1, 190.1729361311845), (10, 198.04420489018713)],
    )
    def test_reference_walk(self, days_back: int, expected: float) -> None:
        """Backward walk matches recorded values."""
        result = day_open_price(symbol_seed("AAPL"), 187.5, TODAY - days_back, TODAY)
        assert result == pytest.approx(expected, rel=1e-12)

    def test_daily_step_bounded(self) -> None:
        """Consecutive day opens differ by at most the 1.5% drift."""
        seed = symbol_seed("MSFT")
        prev = day_open_price(seed, 410.0, TODAY, TODAY)
        for back in range(1, 30):
            cur = day_open_price(seed, 410.0, TODAY - back, TODAY)
            ratio = prev / cur
            assert 1 - 0.015 - 1e-12 <= ratio <= 1 + 0.015 + 1e-12
            prev = cur

    def test_floor_after_long_walk(self) -> None:
        """Very old days never fall below 10% of the base price."""
        seed = symbol_seed("DECAY")
        assert day_open_price(seed, 50.0, TODAY - 5000, TODAY) >= 5.0


class TestPriceAtSecond:
    """Tests for price_at_second."""

    def test_reference_open_scenario(self) -> None:
        """AAA at 100.00 on today at second 0 matches the reference fixture."""
        assert price_at_second("AAA", 100.0, TODAY, 0) == 99.29

    @pytest.mark.parametrize(
        ("day", "second", "expected"),
        [(TODAY, 12345, 188.14), (TODAY - 3, 7200, 194.52)],
    )
    def test_reference_values(self, day: int, second: int, expected: float) -> None:
        """Prices match recorded values."""
        assert price_at_second("AAPL", 187.5, day, second, today=TODAY) == expected

    def test_deterministic(self) -> None:
        """Two evaluations are bit-identical."""
        a = price_at_second("NVDA", 875.25, TODAY - 2, 10_000, today=TODAY)
        b = price_at_second("NVDA", 875.25, TODAY - 2, 10_000, today=TODAY)
        assert a == b

    def test_rounded_to_cents(self) -> None:
        """Emitted prices carry at most 2 decimals."""
        for s in range(0, MARKET_DURATION, 997):
            p = price_at_second("TSLA", 242.1, TODAY, s)
            assert p == round(p, 2)

    def test_today_defaults_to_day(self) -> None:
        """Without ``today`` the day itself is the reference day."""
        assert price_at_second("AAPL", 187.5, TODAY - 3, 7200) == price_at_second(
            "AAPL", 187.5, TODAY - 3, 7200, today=TODAY - 3
        )

    @pytest.mark.parametrize("symbol", ["AAPL", "MSFT", "X", "BRK.B"])
    def test_continuity(self, symbol: str) -> None:
        """Adjacent seconds differ by a small multiple of the day's volatility."""
        base = 150.0
        bound = 0.1 * base * BASE_VOLATILITY + 0.011
        prev = price_at_second(symbol, base, TODAY, 0)
        for s in range(1, 1500):
            cur = price_at_second(symbol, base, TODAY, s)
            assert abs(cur - prev) <= bound
            prev = cur

    @pytest.mark.parametrize("days_back", [0, 1, 7, 25])
    def test_floor_invariant(self, days_back: int) -> None:
        """Prices never fall below 90% of the day's open."""
        seed = symbol_seed("GME")
        day = TODAY - days_back
        day_open = day_open_price(seed, 20.0, day, TODAY)
        for s in range(0, MARKET_DURATION + 1, 600):
            assert price_at_second("GME", 20.0, day, s, today=TODAY) >= 0.9 * day_open

    def test_intraday_range_plausible(self) -> None:
        """The day stays within a few percent of its open."""
        prices = [price_at_second("AAPL", 100.0, TODAY, s) for s in range(0, MARKET_DURATION, 60)]
        assert max(prices) < 104.0
        assert min(prices) > 96.0

    @pytest.mark.parametrize("symbol", ["", "   ", None, 42])
    def test_rejects_bad_symbol(self, symbol: object) -> None:
        """Empty or non-string symbols fail fast."""
        with pytest.raises(InvalidArgumentError):
            price_at_second(symbol, 100.0, TODAY, 0)  # type: ignore[arg-type]

    @pytest.mark.parametrize("price", [0, -1.5, math.nan, math.inf, True])
    def test_rejects_bad_price(self, price: float) -> None:
        """Non-positive or non-finite prices fail fast."""
        with pytest.raises(InvalidArgumentError):
            price_at_second("AAPL", price, TODAY, 0)

    def test_rejects_negative_second(self) -> None:
        """Negative seconds are a contract violation."""
        with pytest.raises(InvalidArgumentError, match="non-negative"):
            price_at_second("AAPL", 100.0, TODAY, -1)


def test_price_point_wraps_price() -> None:
    """price_point carries the second and the kernel price."""
    point = price_point("AAPL", 187.5, TODAY, 12345)
    assert point.second == 12345
    assert point.price == price_at_second("AAPL", 187.5, TODAY, 12345)
