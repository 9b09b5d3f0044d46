"""
Tracer options: an explicit, all-optional options struct merged left to right,
plus factories and presets.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Optional

from .types import CallerInfo, FilterConfig, OutputStyle
from ..filters import print_conditions
from ..filters.print_conditions import PrintCondition

logger = logging.getLogger(__name__)

# Fields that decide whether a trace is printed; replaced together on merge
_PRINT_GATE_FIELDS = ("min_total_duration_ms", "print_condition")


@dataclass(frozen=True)
class TracerOptions:
    """
    Configuration for a Tracer.

    Every field defaults to None, meaning "not set"; the tracer applies its
    own default for anything left unset.

    Args:
        enabled: Record spans at all (default True)
        silent: Collect spans but never print (default False)
        output_style: Report style (default OutputStyle.DEFAULT)
        min_total_duration_ms: Print only if the trace took at least this long
                               (default 100 ms)
        print_condition: Arbitrary predicate over the tracer; overrides
                         min_total_duration_ms when both are set
        show_slow_only: Render only spans at least this slow (ms)
        hide_ultra_fast: Hide spans faster than this (ms)
        group_similar: Group spans within this distance of a seed (ms)
        caller: Where the tracer was created, shown in reports
        color: Emit ANSI colors (default True)
    """
    enabled: Optional[bool] = None
    silent: Optional[bool] = None
    output_style: Optional[OutputStyle] = None
    min_total_duration_ms: Optional[float] = None
    print_condition: Optional[PrintCondition] = None
    show_slow_only: Optional[float] = None
    hide_ultra_fast: Optional[float] = None
    group_similar: Optional[float] = None
    caller: Optional[CallerInfo] = None
    color: Optional[bool] = None

    def merge(self, other: Optional["TracerOptions"]) -> "TracerOptions":
        """
        Overlay ``other`` on top of these options.

        Fields set in ``other`` win. The print gate is treated as a unit: if
        ``other`` sets either gate field, both are taken from ``other`` so the
        last configured condition is the one in force.

        Args:
            other: Options applied later

        Returns:
            New merged TracerOptions
        """
        if other is None:
            return self

        changes = {}
        for f in fields(other):
            if f.name in _PRINT_GATE_FIELDS:
                continue
            value = getattr(other, f.name)
            if value is not None:
                changes[f.name] = value

        if any(getattr(other, name) is not None for name in _PRINT_GATE_FIELDS):
            for name in _PRINT_GATE_FIELDS:
                changes[name] = getattr(other, name)

        return replace(self, **changes)

    def build_print_condition(self) -> PrintCondition:
        """Resolve the print gate into a single predicate."""
        if self.print_condition is not None:
            return self.print_condition
        if self.min_total_duration_ms is not None:
            return print_conditions.min_total_duration(
                _clamp(self.min_total_duration_ms, "min_total_duration_ms")
            )
        return print_conditions.default_condition()

    def build_filter_config(self) -> FilterConfig:
        """Resolve the filter thresholds, clamping negatives to zero."""
        return FilterConfig.from_thresholds(
            show_slow_only=_clamp(self.show_slow_only, "show_slow_only"),
            hide_ultra_fast=_clamp(self.hide_ultra_fast, "hide_ultra_fast"),
            group_similar=_clamp(self.group_similar, "group_similar"),
        )


def _clamp(value: Optional[float], name: str) -> Optional[float]:
    if value is None:
        return None
    if value < 0:
        logger.warning("Negative threshold %s=%r clamped to 0", name, value)
        return 0.0
    return float(value)


def merge_options(*options: Optional[TracerOptions]) -> TracerOptions:
    """
    Merge options left to right; the last non-None value of each field wins.

    Args:
        *options: TracerOptions instances (None entries are skipped)

    Returns:
        Merged TracerOptions
    """
    merged = TracerOptions()
    for opt in options:
        merged = merged.merge(opt)
    return merged


def with_enabled(enabled: bool) -> TracerOptions:
    return TracerOptions(enabled=enabled)


def with_silent(silent: bool) -> TracerOptions:
    return TracerOptions(silent=silent)


def with_output_style(style) -> TracerOptions:
    return TracerOptions(output_style=OutputStyle.resolve(style))


def with_min_total_duration(min_ms: float) -> TracerOptions:
    return TracerOptions(min_total_duration_ms=min_ms)


def with_min_span_duration(min_ms: float) -> TracerOptions:
    return TracerOptions(print_condition=print_conditions.min_span_duration(min_ms))


def with_custom_condition(condition: PrintCondition) -> TracerOptions:
    return TracerOptions(print_condition=condition)


def with_show_slow_only(threshold_ms: float) -> TracerOptions:
    return TracerOptions(show_slow_only=threshold_ms)


def with_hide_ultra_fast(threshold_ms: float) -> TracerOptions:
    return TracerOptions(hide_ultra_fast=threshold_ms)


def with_group_similar(threshold_ms: float) -> TracerOptions:
    return TracerOptions(group_similar=threshold_ms)


def with_smart_filter(
    slow_threshold_ms: float,
    ultra_fast_threshold_ms: float,
    similar_threshold_ms: float
) -> TracerOptions:
    """
    Combine the three filter stages; only positive thresholds enable a stage.

    Args:
        slow_threshold_ms: Show-slow-only threshold (<= 0 leaves it off)
        ultra_fast_threshold_ms: Hide-ultra-fast threshold (<= 0 leaves it off)
        similar_threshold_ms: Group-similar threshold (<= 0 leaves it off)

    Returns:
        TracerOptions with the enabled stages set
    """
    return TracerOptions(
        show_slow_only=slow_threshold_ms if slow_threshold_ms > 0 else None,
        hide_ultra_fast=ultra_fast_threshold_ms if ultra_fast_threshold_ms > 0 else None,
        group_similar=similar_threshold_ms if similar_threshold_ms > 0 else None,
    )


def with_caller(file: str, line: int, function: str = "") -> TracerOptions:
    return TracerOptions(caller=CallerInfo(file=file, line=line, function=function))


def with_color(color: bool) -> TracerOptions:
    return TracerOptions(color=color)


def debug_mode() -> TracerOptions:
    """Always print, detailed report."""
    return TracerOptions(
        enabled=True,
        silent=False,
        output_style=OutputStyle.DETAILED,
        print_condition=print_conditions.always(),
    )


def development_mode() -> TracerOptions:
    """Colorful report for traces of 50 ms or more."""
    return TracerOptions(
        enabled=True,
        silent=False,
        output_style=OutputStyle.COLORFUL,
        min_total_duration_ms=50.0,
    )


def production_mode() -> TracerOptions:
    """Minimal report of spans >= 500 ms, only for traces of 1 s or more."""
    return TracerOptions(
        enabled=True,
        silent=False,
        output_style=OutputStyle.MINIMAL,
        show_slow_only=500.0,
        min_total_duration_ms=1000.0,
    )


def performance_mode() -> TracerOptions:
    """Detailed report of spans >= 100 ms, hiding anything under 1 ms."""
    return TracerOptions(
        output_style=OutputStyle.DETAILED,
        show_slow_only=100.0,
        hide_ultra_fast=1.0,
    )
