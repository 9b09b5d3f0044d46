"""
Quick Trace - lightweight in-process span timing with smart filtering
"""

__version__ = "1.0.0"

from .core.tracer import Tracer, create_tracer
from .core.options import (
    TracerOptions,
    debug_mode,
    development_mode,
    merge_options,
    performance_mode,
    production_mode,
    with_caller,
    with_color,
    with_custom_condition,
    with_enabled,
    with_group_similar,
    with_hide_ultra_fast,
    with_min_span_duration,
    with_min_total_duration,
    with_output_style,
    with_show_slow_only,
    with_silent,
    with_smart_filter,
)
from .core.types import CallerInfo, GroupedMeasurement, Measurement, OutputStyle
from .filters.print_conditions import DEFAULT_MIN_DURATION_MS

__all__ = [
    "Tracer",
    "create_tracer",
    "TracerOptions",
    "merge_options",
    "debug_mode",
    "development_mode",
    "performance_mode",
    "production_mode",
    "with_caller",
    "with_color",
    "with_custom_condition",
    "with_enabled",
    "with_group_similar",
    "with_hide_ultra_fast",
    "with_min_span_duration",
    "with_min_total_duration",
    "with_output_style",
    "with_show_slow_only",
    "with_silent",
    "with_smart_filter",
    "CallerInfo",
    "GroupedMeasurement",
    "Measurement",
    "OutputStyle",
    "DEFAULT_MIN_DURATION_MS",
]
