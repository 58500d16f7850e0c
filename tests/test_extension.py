"""Tests for multi-period extension and interpolation."""

import pytest

from marketsim.calendar import enumerate_trading_days, format_date, is_trading_day
from marketsim.engine.hashing import symbol_seed
from marketsim.exceptions import InvalidArgumentError
from marketsim.extension import (
    authoritative_points,
    drift_offsets,
    extend_periods,
    interpolate,
    nearest_point,
    summarize_points,
)
from marketsim.series import intraday_series, multi_day_daily_series, multi_day_hourly_series
from marketsim.types import ChartPoint, Series, Symbol, Timeframe

TODAY = 20505


@pytest.fixture
def one_day() -> Series:
    return intraday_series("AAPL", 187.5, TODAY, 3600)


def _ohlcv(point) -> tuple:
    return (point.open, point.high, point.low, point.close, point.volume)


class TestExtendPeriods:
    """Tests for extend_periods."""

    def test_ten_period_scenario(self, one_day: Series) -> None:
        """Current period keeps its values, nine prior periods are relabeled and shifted."""
        extended = extend_periods(one_day, 10)
        n = len(one_day)
        assert len(extended) == 10 * n

        current = extended.points[-n:]
        assert [_ohlcv(p) for p in current] == [_ohlcv(p) for p in one_day.points]
        assert current[0].label == "02/21 9:30 AM"

        prior_days = enumerate_trading_days(9, TODAY)
        assert extended.days == prior_days + [TODAY]

        for k in range(9):
            period = extended.points[k * n:(k + 1) * n]
            assert {p.day for p in period} == {prior_days[k]}
            for shifted, template in zip(period, one_day.points):
                assert shifted.label != template.label
                assert shifted.close != template.close
                assert shifted.minute_idx == template.minute_idx

    def test_single_period_relabels_only(self, one_day: Series) -> None:
        """periods=1 keeps every value and rewrites intraday labels."""
        extended = extend_periods(one_day, 1)
        assert [_ohlcv(p) for p in extended.points] == [_ohlcv(p) for p in one_day.points]
        assert extended.points[0].label == "02/21 9:30 AM"

    def test_chronological_and_on_trading_days(self, one_day: Series) -> None:
        """Extended points are ordered and prior days are trading days."""
        extended = extend_periods(one_day, 5)
        keys = [(p.day, p.minute_idx) for p in extended.points]
        assert keys == sorted(keys)
        assert all(is_trading_day(d) for d in extended.days[:-1])

    def test_bars_stay_consistent(self, one_day: Series) -> None:
        """Shifted bars keep low <= open, close <= high and positive volume."""
        for p in extend_periods(one_day, 6).points:
            assert p.low <= p.open <= p.high
            assert p.low <= p.close <= p.high
            assert p.volume > 0

    def test_hourly_period_spans_template_days(self) -> None:
        """A 5-day hourly template extends by 5 trading days per period."""
        template = multi_day_hourly_series("MSFT", 410.0, TODAY, 23400)
        extended = extend_periods(template, 3)
        assert len(extended.days) == 15
        assert len(extended) == 3 * len(template)
        assert extended.points[-1].label == template.points[-1].label

    def test_daily_labels_are_dates(self) -> None:
        """Daily templates keep MM/DD labels."""
        template = multi_day_daily_series("AAPL", 187.5, TODAY, 3600)
        extended = extend_periods(template, 2)
        assert len(extended.days) == 46
        assert extended.points[0].label == format_date(extended.points[0].day)
        assert extended.timeframe == Timeframe.MULTI_DAY_DAILY

    def test_deterministic(self, one_day: Series) -> None:
        """Extension is a pure function of its input."""
        assert extend_periods(one_day, 4) == extend_periods(one_day, 4)

    def test_input_unchanged(self, one_day: Series) -> None:
        """The template series is not modified."""
        labels = [p.label for p in one_day.points]
        extend_periods(one_day, 3)
        assert [p.label for p in one_day.points] == labels

    def test_rejects_zero_periods(self, one_day: Series) -> None:
        with pytest.raises(InvalidArgumentError):
            extend_periods(one_day, 0)

    def test_rejects_empty_series(self) -> None:
        empty = Series(
            symbol=Symbol("AAPL"), base_price=1.0, timeframe=Timeframe.INTRADAY, day=TODAY
        )
        with pytest.raises(InvalidArgumentError, match="empty"):
            extend_periods(empty, 2)


class TestDriftOffsets:
    """Tests for drift_offsets."""

    @pytest.mark.parametrize("direction", [1.0, -1.0])
    def test_magnitude_strictly_increasing(self, direction: float) -> None:
        """Offsets grow in magnitude with distance from the current period."""
        offsets = drift_offsets(symbol_seed("AAPL"), 187.5, 12, direction)
        magnitudes = [abs(o) for o in offsets]
        assert all(a < b for a, b in zip(magnitudes, magnitudes[1:]))
        assert all((o > 0) == (direction > 0) for o in offsets)

    def test_empty(self) -> None:
        assert len(drift_offsets(symbol_seed("AAPL"), 187.5, 0, 1.0)) == 0


class TestInterpolate:
    """Tests for interpolate and the helpers that ignore synthetic points."""

    def test_inserts_steps_between_points(self, one_day: Series) -> None:
        chart = interpolate(one_day, 3)
        n = len(one_day)
        assert len(chart) == n + 3 * (n - 1)
        assert len(authoritative_points(chart)) == n
        assert sum(p.interpolated for p in chart) == 3 * (n - 1)

    def test_real_points_unchanged(self, one_day: Series) -> None:
        real = authoritative_points(interpolate(one_day, 4))
        assert [p.price for p in real] == one_day.prices
        assert [p.source_index for p in real] == list(range(len(one_day)))

    def test_zero_steps(self, one_day: Series) -> None:
        chart = interpolate(one_day, 0)
        assert not any(p.interpolated for p in chart)
        assert len(chart) == len(one_day)

    def test_jitter_bounded(self, one_day: Series) -> None:
        """Synthetic points stay near the segment between their neighbours."""
        chart = interpolate(one_day, 2)
        anchor = one_day.points[0].open
        for i in range(len(one_day) - 1):
            a = one_day.points[i].close
            b = one_day.points[i + 1].close
            spread = max(abs(b - a), anchor * 0.0005)
            for p in chart[i * 3 + 1:i * 3 + 3]:
                assert p.interpolated
                assert min(a, b) - spread * 0.25 - 0.01 <= p.price <= max(a, b) + spread * 0.25 + 0.01

    def test_deterministic(self, one_day: Series) -> None:
        assert interpolate(one_day, 3) == interpolate(one_day, 3)

    def test_negative_steps_rejected(self, one_day: Series) -> None:
        with pytest.raises(InvalidArgumentError):
            interpolate(one_day, -1)

    def test_nearest_point_skips_interpolated(self, one_day: Series) -> None:
        chart = interpolate(one_day, 3)
        for position in range(len(chart)):
            found = nearest_point(chart, position)
            assert found is not None
            assert not found.interpolated
        assert nearest_point(chart, 1) == chart[0]
        assert nearest_point(chart, 3) == chart[4]

    def test_nearest_point_empty(self) -> None:
        assert nearest_point([ChartPoint(label="x", price=1.0, interpolated=True)], 0) is None

    def test_summary_ignores_interpolated(self) -> None:
        points = [
            ChartPoint(label="a", price=10.0, source_index=0),
            ChartPoint(label="a", price=50.0, interpolated=True),
            ChartPoint(label="b", price=12.0, source_index=1),
        ]
        summary = summarize_points(points)
        assert summary == {"low": 10.0, "high": 12.0, "first": 10.0, "last": 12.0, "change": 2.0}

    def test_summary_requires_real_points(self) -> None:
        with pytest.raises(InvalidArgumentError):
            summarize_points([ChartPoint(label="a", price=1.0, interpolated=True)])
