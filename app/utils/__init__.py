"""Utility functions for time handling and age calculation."""

from .timestamps import (
    compute_age,
    ensure_utc,
    format_timestamp,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "compute_age",
]
