"""Formatting helpers for trace reports."""

from .time_formatter import format_time, format_threshold
from .color_rules import Palette, speed_class

__all__ = ["format_time", "format_threshold", "Palette", "speed_class"]
