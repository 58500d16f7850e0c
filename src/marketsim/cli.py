#!/usr/bin/env python3
"""Command-line interface for the market simulator."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import TYPE_CHECKING

from marketsim.types import Timeframe

if TYPE_CHECKING:
    from marketsim.types import MarketState


def parse_day(date_str: str) -> int:
    """Parse a YYYY-MM-DD string into a day number."""
    from marketsim.calendar import day_number

    return day_number(datetime.strptime(date_str, "%Y-%m-%d").date())


def _resolve_state(args: argparse.Namespace) -> MarketState:
    """Market state for the --day / --time options."""
    from marketsim.calendar import SIMULATED_DAY
    from marketsim.clock import FixedClock, SystemClock, market_state, parse_time_of_day

    day = parse_day(args.day) if args.day else SIMULATED_DAY
    if args.time:
        clock = FixedClock.at_time_of_day(parse_time_of_day(args.time))
    else:
        clock = SystemClock()
    return market_state(clock, day)


def cmd_quote(args: argparse.Namespace) -> int:
    """Print summary statistics for a symbol."""
    from marketsim.calendar import format_date
    from marketsim.exceptions import InvalidArgumentError
    from marketsim.stats import build_quote

    try:
        state = _resolve_state(args)
        quote = build_quote(args.symbol, args.price, state)
    except (InvalidArgumentError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print("=" * 60)
    print(f"QUOTE: {quote.symbol}")
    print("=" * 60)
    print(f"Day:             {format_date(state.trading_day)} ({quote.as_of})")
    print(f"Price:           ${quote.price:,.2f}")
    print(f"Change:          {quote.change:+.2f} ({quote.change_percent:+.2f}%)")
    print(f"Previous Close:  {quote.previous_close:.2f}")
    print(f"Open:            {quote.open:.2f}")
    print(f"Day's Range:     {quote.day_range}")
    print(f"Volume:          {quote.volume:,}")
    return 0


def cmd_series(args: argparse.Namespace) -> int:
    """Print a generated series."""
    from marketsim.exceptions import InvalidArgumentError, StorageError
    from marketsim.export import write_series
    from marketsim.extension import extend_periods
    from marketsim.series import generate_series

    try:
        state = _resolve_state(args)
        series = generate_series(
            args.timeframe,
            args.symbol,
            args.price,
            state.trading_day,
            state.seconds_since_open,
        )
        if args.periods != 1:
            series = extend_periods(series, args.periods)
    except (InvalidArgumentError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.output:
        try:
            path = write_series(series, args.output, args.format)
        except (InvalidArgumentError, StorageError) as e:
            print(f"Failed to write series: {e}")
            return 1
        print(f"Wrote {len(series)} points to {path}")
        return 0

    print("=" * 70)
    print(f"SERIES: {series.symbol} ({series.timeframe.value}, {len(series)} points)")
    print("=" * 70)
    print(f"{'Label':<16} {'Open':>10} {'High':>10} {'Low':>10} {'Close':>10} {'Volume':>9}")
    print("-" * 70)

    points = series.points[-args.limit:] if args.limit else series.points
    if len(points) < len(series):
        print(f"... {len(series) - len(points)} earlier points")
    for p in points:
        print(
            f"{p.label:<16} {p.open:>10.2f} {p.high:>10.2f} {p.low:>10.2f} "
            f"{p.close:>10.2f} {p.volume:>9,}"
        )
    return 0


def cmd_gen_series(args: argparse.Namespace) -> int:
    """Generate and export series from a configuration file."""
    from marketsim.commands.gen_series import load_gen_series_config, run_gen_series
    from marketsim.exceptions import ConfigError, StorageError

    try:
        config = load_gen_series_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    logging.getLogger().setLevel(config.log_level)

    print("=" * 60)
    print("GENERATE SERIES")
    print("=" * 60)
    print(f"Tickers:     {', '.join(str(t.symbol) for t in config.tickers)}")
    print(f"Timeframes:  {', '.join(t.value for t in config.timeframes)}")
    print(f"Periods:     {config.extend_periods}")
    print(f"Output:      {config.output_directory} ({config.output_format})")

    try:
        paths = run_gen_series(config)
    except StorageError as e:
        print(f"Failed to write series: {e}")
        return 1

    for path in paths:
        print(f"   {path}")
    print(f"\n✅ Wrote {len(paths)} files")
    return 0


def _add_time_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("symbol", help="Ticker symbol (e.g., AAPL)")
    parser.add_argument(
        "-p", "--price", type=float, required=True, help="Reference price for the day"
    )
    parser.add_argument(
        "--day", default=None, help="Simulated day (YYYY-MM-DD, default: 2026-02-21)"
    )
    parser.add_argument(
        "--time", default=None, help="Local time of day (HH:MM[:SS], default: now)"
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Deterministic market-data simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Quote command
    quote_parser = subparsers.add_parser("quote", help="Show summary statistics")
    _add_time_options(quote_parser)

    # Series command
    series_parser = subparsers.add_parser("series", help="Show a generated series")
    _add_time_options(series_parser)
    series_parser.add_argument(
        "-t",
        "--timeframe",
        default=Timeframe.INTRADAY.value,
        choices=[t.value for t in Timeframe],
        help="Series shape (default: intraday)",
    )
    series_parser.add_argument(
        "--periods", type=int, default=1, help="Total periods after extension"
    )
    series_parser.add_argument(
        "-n", "--limit", type=int, default=0, help="Show only the last N points"
    )
    series_parser.add_argument("-o", "--output", default=None, help="Write to file")
    series_parser.add_argument(
        "-f", "--format", default="json", choices=["json", "csv"], help="Output format"
    )

    # Gen-series command
    gen_parser = subparsers.add_parser(
        "gen-series", help="Generate and export series from configuration"
    )
    gen_parser.add_argument("config", help="Path to YAML configuration file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "quote":
        return cmd_quote(args)
    elif args.command == "series":
        return cmd_series(args)
    elif args.command == "gen-series":
        return cmd_gen_series(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
