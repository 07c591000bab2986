"""
Utilities package for the banking data quality toolkit.

Exports shared helpers for logging, profiling, and numeric summaries.
Keep this package lightweight and free of check-specific logic.
"""

from bankdq.utils.logging import configure_logging, get_logger
from bankdq.utils.profiler import ProfileStats, profile_block
from bankdq.utils.stats import mean, percentage, percentile_cont, ratio, sample_stdev

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
    "mean",
    "percentage",
    "percentile_cont",
    "ratio",
    "sample_stdev",
]
