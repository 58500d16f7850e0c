"""Multi-period extension and interpolation of rendered series.

:func:`extend_periods` grows one rendered period into a longer window by
replaying it, drift-shifted, over earlier trading days. :func:`interpolate`
inserts synthetic in-between points for a smoother line; those points are
flagged and never take part in point lookup or statistics.
"""

from __future__ import annotations

import logging

import numpy as np

from marketsim.calendar import enumerate_trading_days, format_date, format_datetime
from marketsim.engine.hashing import MASK32, mix2, signed_mix2, symbol_seed
from marketsim.exceptions import InvalidArgumentError
from marketsim.types import ChartPoint, Series, SeriesPoint, Timeframe

logger = logging.getLogger(__name__)

CHANNEL_DRIFT = 0x5EED0001
CHANNEL_POINT_NOISE = 0x5EED0002
CHANNEL_VOLUME_SCALE = 0x5EED0003
CHANNEL_DIRECTION = 0x5EED0004
CHANNEL_INTERPOLATION = 0x5EED0005

DRIFT_STEP = 0.008
POINT_NOISE = 0.002
EXTENSION_FLOOR = 0.1
MIN_JITTER_SPREAD = 0.0005
JITTER_WEIGHT = 0.25

# Offsets into a period's point stream; keeps per-point keys of periods apart
_PERIOD_STRIDE = 10000


def _key(seed: int, channel: int) -> int:
    return (seed ^ channel) & MASK32


def point_label(timeframe: Timeframe, day: int, minute_idx: int) -> str:
    """Axis label of a point in a window spanning several days."""
    if timeframe == Timeframe.MULTI_DAY_DAILY:
        return format_date(day)
    return format_datetime(day, minute_idx)


def drift_offsets(seed: int, anchor: float, prior_periods: int, direction: float) -> np.ndarray:
    """Price offset of each prior period, nearest period first.

    Magnitudes are cumulative sums of positive seeded steps, so they grow
    strictly with distance from the current period.
    """
    drift_key = _key(seed, CHANNEL_DRIFT)
    steps = np.array(
        [anchor * DRIFT_STEP * (0.5 + mix2(drift_key, k)) for k in range(1, prior_periods + 1)],
        dtype=np.float64,
    )
    return direction * np.cumsum(steps)


def extend_periods(series: Series, periods: int) -> Series:
    """Extend a rendered period backward into ``periods`` periods in total.

    The most recent period keeps its values; only its labels are rewritten for
    the longer calendar. Each earlier period replays the template on earlier
    trading days, shifted by a seeded drift plus small per-point noise.

    :param series: Template series (one period).
    :param periods: Total number of periods in the result (>= 1).
    :returns: Series covering ``periods`` periods, oldest first.
    :raises InvalidArgumentError: If ``periods`` < 1 or the series is empty.
    """
    if periods < 1:
        raise InvalidArgumentError(f"Period count must be at least 1, got {periods}")
    if not series.points:
        raise InvalidArgumentError("Cannot extend an empty series")

    template_days = series.days
    period_len = len(template_days)
    prior_periods = periods - 1
    prior_days = enumerate_trading_days(prior_periods * period_len, template_days[0])

    seed = symbol_seed(series.symbol)
    anchor = series.points[0].open
    direction = 1.0 if mix2(_key(seed, CHANNEL_DIRECTION), series.day) < 0.5 else -1.0
    offsets = drift_offsets(seed, anchor, prior_periods, direction)

    template_ohlc = np.array(
        [[p.open, p.high, p.low, p.close] for p in series.points], dtype=np.float64
    )
    noise_key = _key(seed, CHANNEL_POINT_NOISE)
    volume_key = _key(seed, CHANNEL_VOLUME_SCALE)
    floor = anchor * EXTENSION_FLOOR

    points: list[SeriesPoint] = []
    for k in range(prior_periods, 0, -1):
        start = (prior_periods - k) * period_len
        day_map = dict(zip(template_days, prior_days[start:start + period_len]))

        noise = np.array(
            [
                anchor * POINT_NOISE * signed_mix2(noise_key, k * _PERIOD_STRIDE + i)
                for i in range(len(series.points))
            ]
        )
        # One shift per point for all four prices keeps low <= open, close <= high
        shifted = np.round(
            np.maximum(template_ohlc + (offsets[k - 1] + noise)[:, None], floor), 2
        )

        for i, (template, row) in enumerate(zip(series.points, shifted)):
            day = day_map[template.day]
            scale = 0.8 + 0.4 * mix2(volume_key, k * _PERIOD_STRIDE + i)
            points.append(
                SeriesPoint(
                    label=point_label(series.timeframe, day, template.minute_idx),
                    day=day,
                    minute_idx=template.minute_idx,
                    open=float(row[0]),
                    high=float(row[1]),
                    low=float(row[2]),
                    close=float(row[3]),
                    volume=max(1, int(template.volume * scale)),
                )
            )

    for template in series.points:
        points.append(
            template.model_copy(
                update={
                    "label": point_label(series.timeframe, template.day, template.minute_idx)
                }
            )
        )

    logger.debug(
        "Extended %s %s series to %d periods (%d points)",
        series.symbol,
        series.timeframe.value,
        periods,
        len(points),
    )
    return series.model_copy(update={"points": points})


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


def interpolate(series: Series, steps: int) -> list[ChartPoint]:
    """Insert ``steps`` synthetic points between each pair of real points.

    Synthetic points follow the straight line between their neighbours plus a
    seeded jitter bounded by a quarter of the local move.

    :param series: Source series.
    :param steps: Points to insert per gap (0 = none).
    :returns: Chart points; synthetic ones have ``interpolated=True``.
    :raises InvalidArgumentError: If ``steps`` is negative.
    """
    if steps < 0:
        raise InvalidArgumentError(f"Interpolation steps must be non-negative, got {steps}")

    key = _key(symbol_seed(series.symbol), CHANNEL_INTERPOLATION)
    anchor = series.points[0].open if series.points else series.base_price
    chart: list[ChartPoint] = []

    for i, point in enumerate(series.points):
        chart.append(ChartPoint(label=point.label, price=point.close, source_index=i))
        if i == len(series.points) - 1:
            break

        a = point.close
        b = series.points[i + 1].close
        spread = max(abs(b - a), anchor * MIN_JITTER_SPREAD)
        for j in range(1, steps + 1):
            frac = j / (steps + 1)
            jitter = signed_mix2(key, i * (steps + 1) + j) * spread * JITTER_WEIGHT
            chart.append(
                ChartPoint(
                    label=point.label,
                    price=round(a + (b - a) * frac + jitter, 2),
                    interpolated=True,
                )
            )
    return chart


def authoritative_points(points: list[ChartPoint]) -> list[ChartPoint]:
    """Drop interpolated points."""
    return [p for p in points if not p.interpolated]


def nearest_point(points: list[ChartPoint], position: float) -> ChartPoint | None:
    """Real point closest to a chart x position, for tooltips.

    :param points: Chart points in x-axis order.
    :param position: Fractional index into ``points``.
    :returns: Nearest non-interpolated point (earlier one on ties), or None.
    """
    best: ChartPoint | None = None
    best_distance = float("inf")
    for idx, point in enumerate(points):
        if point.interpolated:
            continue
        distance = abs(idx - position)
        if distance < best_distance:
            best, best_distance = point, distance
    return best


def summarize_points(points: list[ChartPoint]) -> dict[str, float]:
    """Low, high, first, last and change over the real points.

    :raises InvalidArgumentError: If there are no real points.
    """
    prices = np.array([p.price for p in authoritative_points(points)], dtype=np.float64)
    if prices.size == 0:
        raise InvalidArgumentError("No authoritative points to summarize")
    return {
        "low": float(prices.min()),
        "high": float(prices.max()),
        "first": float(prices[0]),
        "last": float(prices[-1]),
        "change": round(float(prices[-1] - prices[0]), 2),
    }
