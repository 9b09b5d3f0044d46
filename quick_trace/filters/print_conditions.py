"""
Print conditions: predicates deciding whether a finished trace is rendered.

Each factory returns a callable taking the tracer and returning a bool.
Conditions read the tracer only through its public accessors.
"""

from typing import Any, Callable

# Default gate: only print traces that took at least this long
DEFAULT_MIN_DURATION_MS = 100.0

PrintCondition = Callable[[Any], bool]


def min_total_duration(min_ms: float) -> PrintCondition:
    """Print when the whole trace took at least ``min_ms``."""
    def condition(tracer) -> bool:
        return tracer.get_total_duration() >= min_ms
    return condition


def min_span_duration(min_ms: float) -> PrintCondition:
    """Print when any recorded span took at least ``min_ms``."""
    def condition(tracer) -> bool:
        return any(m.duration_ms >= min_ms for m in tracer.get_measurements())
    return condition


def always() -> PrintCondition:
    """Print every trace (debug mode)."""
    return lambda tracer: True


def default_condition() -> PrintCondition:
    return min_total_duration(DEFAULT_MIN_DURATION_MS)
