"""Configuration and execution for the gen-series command.

Example config file (gen_series.yaml):

    tickers:
      - symbol: "AAPL"
        base_price: 187.50
      - symbol: "MSFT"
        base_price: 410.00
    timeframes: ["intraday", "multi_day_hourly", "multi_day_daily"]
    simulated_day: "2026-02-21"   # Optional
    market_time: "11:15"          # Optional, wall clock when omitted
    extend_periods: 1             # Optional
    interpolation_steps: 0        # Optional
    output:
      directory: "out"
      format: "json"
    logging:
      level: "INFO"
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from marketsim.calendar import SIMULATED_DAY, day_number
from marketsim.clock import Clock, FixedClock, SystemClock, market_state, parse_time_of_day
from marketsim.exceptions import ConfigError, InvalidArgumentError
from marketsim.export import (
    VALID_FORMATS,
    chart_filename,
    series_filename,
    write_chart_points,
    write_series,
)
from marketsim.extension import extend_periods, interpolate
from marketsim.series import generate_series
from marketsim.types import GenSeriesConfig, Series, Symbol, TickerSpec, Timeframe

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


def _parse_day(value: str | date) -> int:
    """Parse a ``YYYY-MM-DD`` string or date into a day number.

    :raises ConfigError: If parsing fails.
    """
    if isinstance(value, datetime):
        return day_number(value.date())
    if isinstance(value, date):
        return day_number(value)
    try:
        return day_number(datetime.strptime(str(value), "%Y-%m-%d").date())
    except ValueError as e:
        raise ConfigError(f"Invalid date format: {value}") from e


def _parse_tickers(raw_tickers: Any) -> list[TickerSpec]:
    if not isinstance(raw_tickers, list) or len(raw_tickers) == 0:
        raise ConfigError("'tickers' must be a non-empty list")

    tickers = []
    for i, raw in enumerate(raw_tickers):
        if not isinstance(raw, dict):
            raise ConfigError(f"'tickers[{i}]' must be a mapping with 'symbol' and 'base_price'")
        symbol = raw.get("symbol")
        if not isinstance(symbol, str) or not symbol.strip():
            raise ConfigError(f"'tickers[{i}].symbol' must be a non-empty string")
        base_price = raw.get("base_price")
        if (
            isinstance(base_price, bool)
            or not isinstance(base_price, (int, float))
            or base_price <= 0
        ):
            raise ConfigError(f"'tickers[{i}].base_price' must be a positive number")
        tickers.append(TickerSpec(symbol=Symbol(symbol), base_price=float(base_price)))
    return tickers


def _parse_timeframes(raw_timeframes: Any) -> list[Timeframe]:
    if isinstance(raw_timeframes, str):
        raw_timeframes = [raw_timeframes]
    if not isinstance(raw_timeframes, list) or len(raw_timeframes) == 0:
        raise ConfigError("'timeframes' must be a non-empty list")

    valid = sorted(t.value for t in Timeframe)
    timeframes = []
    for raw in raw_timeframes:
        if raw not in valid:
            raise ConfigError(f"Invalid timeframe '{raw}'. Valid options: {valid}")
        timeframes.append(Timeframe(raw))
    return timeframes


def _parse_int_at_least(raw_config: dict[str, Any], field: str, default: int, minimum: int) -> int:
    value = raw_config.get(field, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigError(f"'{field}' must be an integer >= {minimum}")
    return value


def load_gen_series_config(config_path: str | Path) -> GenSeriesConfig:
    """Parse and validate a gen-series configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated GenSeriesConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    for field in ("tickers", "timeframes"):
        if field not in raw_config:
            raise ConfigError(f"Missing required field: {field}")

    tickers = _parse_tickers(raw_config["tickers"])
    timeframes = _parse_timeframes(raw_config["timeframes"])

    simulated_day = SIMULATED_DAY
    if raw_config.get("simulated_day") is not None:
        simulated_day = _parse_day(raw_config["simulated_day"])

    # Parse market_time (optional)
    market_time: int | None = None
    if raw_config.get("market_time") is not None:
        try:
            market_time = parse_time_of_day(str(raw_config["market_time"]))
        except InvalidArgumentError as e:
            raise ConfigError(f"'market_time' must be HH:MM or HH:MM:SS: {e}") from e

    extend = _parse_int_at_least(raw_config, "extend_periods", 1, 1)
    steps = _parse_int_at_least(raw_config, "interpolation_steps", 0, 0)

    # Parse output (optional)
    raw_output = raw_config.get("output", {})
    if not isinstance(raw_output, dict):
        raise ConfigError("'output' must be a mapping")
    output_format = str(raw_output.get("format", "json")).lower()
    if output_format not in VALID_FORMATS:
        raise ConfigError(
            f"Invalid output format '{output_format}'. Valid options: {sorted(VALID_FORMATS)}"
        )
    output_directory = str(raw_output.get("directory", "out"))

    # Parse logging (optional)
    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return GenSeriesConfig(
        tickers=tickers,
        timeframes=timeframes,
        simulated_day=simulated_day,
        market_time=market_time,
        extend_periods=extend,
        interpolation_steps=steps,
        output_directory=output_directory,
        output_format=output_format,
        log_level=log_level,
    )


def build_series(config: GenSeriesConfig, clock: Clock | None = None) -> list[Series]:
    """Generate every ticker x timeframe series described by ``config``.

    :param config: Validated configuration.
    :param clock: Time source; a fixed clock is used when ``market_time`` is
        set, the system clock otherwise.
    :returns: Series in config order (tickers outer, timeframes inner).
    """
    if clock is None:
        if config.market_time is not None:
            clock = FixedClock.at_time_of_day(config.market_time)
        else:
            clock = SystemClock()
    state = market_state(clock, config.simulated_day)

    result = []
    for ticker in config.tickers:
        for timeframe in config.timeframes:
            series = generate_series(
                timeframe,
                ticker.symbol,
                ticker.base_price,
                state.trading_day,
                state.seconds_since_open,
            )
            if config.extend_periods > 1:
                series = extend_periods(series, config.extend_periods)
            result.append(series)
    logger.debug("Built %d series at market second %d", len(result), state.seconds_since_open)
    return result


def run_gen_series(config: GenSeriesConfig, clock: Clock | None = None) -> list[Path]:
    """Generate and write all configured series.

    :returns: Paths of the written files.
    :raises StorageError: If a file cannot be written.
    """
    out_dir = Path(config.output_directory)
    written = []
    for series in build_series(config, clock):
        written.append(
            write_series(
                series,
                out_dir / series_filename(series, config.output_format),
                config.output_format,
            )
        )
        if config.interpolation_steps > 0:
            chart = interpolate(series, config.interpolation_steps)
            written.append(write_chart_points(chart, out_dir / chart_filename(series)))
    return written
