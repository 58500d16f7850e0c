"""CLI command implementations for the market simulator.

Each command module provides:
- Configuration loading and validation
- Command execution logic
- Integration with core library functions
"""

from marketsim.commands.gen_series import build_series, load_gen_series_config, run_gen_series

__all__ = [
    "build_series",
    "load_gen_series_config",
    "run_gen_series",
]
