"""Core components for span tracing."""

from .tracer import Tracer, create_tracer
from .options import TracerOptions, merge_options
from .types import (
    END_LABEL,
    CallerInfo,
    FilterConfig,
    GroupedMeasurement,
    ItemKind,
    Measurement,
    OutputStyle,
    RenderContext,
    RenderItem,
)

__all__ = [
    "Tracer",
    "create_tracer",
    "TracerOptions",
    "merge_options",
    "END_LABEL",
    "CallerInfo",
    "FilterConfig",
    "GroupedMeasurement",
    "ItemKind",
    "Measurement",
    "OutputStyle",
    "RenderContext",
    "RenderItem",
]
