"""Core type definitions for the market simulator.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from enum import Enum
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Type aliases for domain-specific identifiers
Symbol = NewType("Symbol", str)
SymbolSeed = NewType("SymbolSeed", int)
TradingDay = NewType("TradingDay", int)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class Timeframe(str, Enum):
    """Shape of a generated series."""

    INTRADAY = "intraday"
    MULTI_DAY_HOURLY = "multi_day_hourly"
    MULTI_DAY_DAILY = "multi_day_daily"


class PricePoint(FrozenModel):
    """Price sampled at a single second of the session.

    :param second: Seconds since the session open.
    :param price: Price rounded to 2 decimal places.
    """

    second: int = Field(ge=0)
    price: float = Field(gt=0)


class Bar(FrozenModel):
    """OHLCV aggregate over a fixed time bucket.

    :param open: Opening price.
    :param high: Highest sampled price.
    :param low: Lowest sampled price.
    :param close: Closing price.
    :param volume: Traded volume (positive integer).
    """

    open: float
    high: float
    low: float
    close: float
    volume: int = Field(gt=0)

    @model_validator(mode="after")
    def _check_ordering(self) -> Bar:
        if not (self.low <= self.open <= self.high and self.low <= self.close <= self.high):
            raise ValueError(
                f"Bar prices out of order: open={self.open} high={self.high} "
                f"low={self.low} close={self.close}"
            )
        return self

    @property
    def price(self) -> float:
        """Line-chart value of the bar (its close)."""
        return self.close


class SeriesPoint(Bar):
    """Bar placed on a chart axis.

    :param label: Axis label ("9:30 AM", "02/17 10:30 AM", "02/17").
    :param day: Trading day the bar belongs to.
    :param minute_idx: Minute of the session (0 = 9:30 AM, 389 = 3:59 PM).
    """

    label: str
    day: int
    minute_idx: int = Field(ge=0, le=389)


class Series(FrozenModel):
    """Chronologically ordered points tagged with their timeframe.

    :param symbol: Ticker symbol the series was generated for.
    :param base_price: Reference price used to generate the series.
    :param timeframe: Shape of the series.
    :param day: Current (most recent) trading day of the series.
    :param points: Points in chart x-axis order.
    """

    symbol: Symbol
    base_price: float
    timeframe: Timeframe
    day: int
    points: list[SeriesPoint] = Field(default_factory=list)

    @property
    def prices(self) -> list[float]:
        """Closing prices in chart order."""
        return [p.close for p in self.points]

    @property
    def days(self) -> list[int]:
        """Distinct trading days covered, oldest first."""
        return sorted({p.day for p in self.points})

    def __len__(self) -> int:
        return len(self.points)


class ChartPoint(FrozenModel):
    """Point of a rendered line, possibly synthesized by interpolation.

    :param label: Axis label of the point.
    :param price: Plotted value.
    :param interpolated: True for synthetic in-between points.
    :param source_index: Index of the originating series point, None when
        interpolated.
    """

    label: str
    price: float
    interpolated: bool = False
    source_index: int | None = None


# ---------------------------------------------------------------------------
# Market State & Statistics
# ---------------------------------------------------------------------------


class MarketState(FrozenModel):
    """Simulated session position derived from a clock reading.

    :param trading_day: Simulated trading day (days since epoch).
    :param seconds_since_open: Seconds since 9:30 AM, clamped to [0, 23400].
    :param is_open: Whether the wall-clock time falls inside the session.
    :param unix_sec: Wall-clock reading the state was derived from.
    """

    trading_day: int
    seconds_since_open: int = Field(ge=0, le=23400)
    is_open: bool
    unix_sec: int


class Quote(FrozenModel):
    """Summary statistics for a symbol at a market state.

    :param symbol: Ticker symbol.
    :param price: Current price.
    :param previous_close: Closing price of the previous trading day.
    :param change: ``price - previous_close``.
    :param change_percent: Change relative to the previous close, in percent.
    :param open: Today's opening price.
    :param day_low: Lowest 5-minute sample so far today.
    :param day_high: Highest 5-minute sample so far today.
    :param volume: Cumulative volume traded so far today.
    :param as_of: Human-readable elapsed-time label.
    """

    symbol: Symbol
    price: float
    previous_close: float
    change: float
    change_percent: float
    open: float
    day_low: float
    day_high: float
    volume: int
    as_of: str

    @property
    def day_range(self) -> str:
        """Day range formatted as ``"low - high"``."""
        return f"{self.day_low:.2f} - {self.day_high:.2f}"


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class TickerSpec(FrozenModel):
    """Ticker to simulate.

    :param symbol: Ticker symbol.
    :param base_price: Today's reference price.
    """

    symbol: Symbol
    base_price: float


class GenSeriesConfig(FrozenModel):
    """Configuration for the gen-series command.

    :param tickers: Tickers to simulate.
    :param timeframes: Series shapes to generate per ticker.
    :param simulated_day: Trading day treated as "today".
    :param market_time: Local time-of-day in seconds, or None for the wall clock.
    :param extend_periods: Number of periods in each output series (1 = none
        added).
    :param interpolation_steps: Synthetic points inserted between real points.
    :param output_directory: Directory the series files are written to.
    :param output_format: "json" or "csv".
    :param log_level: Logging level name.
    """

    tickers: list[TickerSpec]
    timeframes: list[Timeframe]
    simulated_day: int
    market_time: int | None = None
    extend_periods: int = 1
    interpolation_steps: int = 0
    output_directory: str = "out"
    output_format: str = "json"
    log_level: str = "INFO"


__all__ = [
    "Symbol",
    "SymbolSeed",
    "TradingDay",
    "FrozenModel",
    "Timeframe",
    "PricePoint",
    "Bar",
    "SeriesPoint",
    "Series",
    "ChartPoint",
    "MarketState",
    "Quote",
    "TickerSpec",
    "GenSeriesConfig",
]
