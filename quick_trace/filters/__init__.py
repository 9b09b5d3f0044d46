"""Filtering and print gating for recorded spans."""

from .smart_filter import SmartFilter
from .print_conditions import (
    DEFAULT_MIN_DURATION_MS,
    always,
    min_span_duration,
    min_total_duration,
)

__all__ = [
    "SmartFilter",
    "DEFAULT_MIN_DURATION_MS",
    "always",
    "min_span_duration",
    "min_total_duration",
]
