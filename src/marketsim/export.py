"""Writing generated series to disk as CSV or JSON."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import TypeAdapter

from marketsim.exceptions import InvalidArgumentError, StorageError
from marketsim.types import ChartPoint, Series

logger = logging.getLogger(__name__)

VALID_FORMATS = frozenset(["csv", "json"])

CSV_COLUMNS = ["label", "day", "minute_idx", "open", "high", "low", "close", "volume"]

_CHART_POINTS = TypeAdapter(list[ChartPoint])


def series_filename(series: Series, fmt: str) -> str:
    """``AAPL_intraday.json`` style file name for a series."""
    return f"{series.symbol}_{series.timeframe.value}.{fmt}"


def write_series(series: Series, path: str | Path, fmt: str = "json") -> Path:
    """Write a series to ``path``.

    :param series: Series to write.
    :param path: Destination file; parent directories are created.
    :param fmt: "csv" or "json".
    :returns: The written path.
    :raises InvalidArgumentError: If the format is unknown.
    :raises StorageError: If the file cannot be written.
    """
    if fmt not in VALID_FORMATS:
        raise InvalidArgumentError(
            f"Invalid output format '{fmt}'. Valid options: {sorted(VALID_FORMATS)}"
        )

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if fmt == "json":
            path.write_text(series.model_dump_json(indent=2), encoding="utf-8")
        else:
            with open(path, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
                writer.writeheader()
                for point in series.points:
                    writer.writerow(point.model_dump(include=set(CSV_COLUMNS)))
    except OSError as e:
        raise StorageError(f"Failed to write series to {path}: {e}") from e

    logger.info("Wrote %d points to %s", len(series.points), path)
    return path


def chart_filename(series: Series) -> str:
    """``AAPL_intraday_chart.json`` style file name for interpolated points."""
    return f"{series.symbol}_{series.timeframe.value}_chart.json"


def write_chart_points(points: list[ChartPoint], path: str | Path) -> Path:
    """Write chart points (including interpolated ones) as JSON.

    :raises StorageError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_CHART_POINTS.dump_json(points, indent=2))
    except OSError as e:
        raise StorageError(f"Failed to write chart points to {path}: {e}") from e

    logger.info("Wrote %d chart points to %s", len(points), path)
    return path


def read_series_json(path: str | Path) -> Series:
    """Load a series previously written as JSON.

    :raises StorageError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        return Series.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise StorageError(f"Failed to read series from {path}: {e}") from e
    except ValueError as e:
        raise StorageError(f"Invalid series file {path}: {e}") from e
