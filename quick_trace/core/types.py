"""
Type definitions for span tracing.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Label appended by Tracer.end() for the tail span
END_LABEL = "End"


class OutputStyle(Enum):
    """Report styles understood by the renderer dispatch."""
    DEFAULT = "default"
    COLORFUL = "colorful"
    MINIMAL = "minimal"
    DETAILED = "detailed"
    TABLE = "table"
    JSON = "json"

    @classmethod
    def parse(cls, value: Union[str, "OutputStyle"]) -> "OutputStyle":
        """
        Resolve a style from a member or a case-insensitive name.

        Args:
            value: OutputStyle member or name such as "table" or "JSON"

        Returns:
            Matching OutputStyle member

        Raises:
            ValueError: If the name is not a known style
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = [style.value for style in cls]
            raise ValueError(f"Unknown output style '{value}'. Must be one of: {names}") from None

    @classmethod
    def resolve(cls, value: Union[str, "OutputStyle"]) -> "OutputStyle":
        """
        Lenient parse for runtime configuration.

        Unknown names are logged and resolve to DEFAULT instead of raising.

        Args:
            value: OutputStyle member or style name

        Returns:
            Matching OutputStyle member, or OutputStyle.DEFAULT
        """
        try:
            return cls.parse(value)
        except ValueError as e:
            logger.warning("%s; using '%s'", e, cls.DEFAULT.value)
            return cls.DEFAULT


@dataclass(frozen=True)
class Measurement:
    """Elapsed time between two consecutive marks."""
    label: str
    duration_ms: float


@dataclass(frozen=True)
class GroupedMeasurement:
    """
    Aggregate of measurements whose durations lie close to a seed.

    ``name`` is the display name ("db + 2 similar"); ``seed_label`` is the
    seed's own label, stable across traces.
    """
    name: str
    seed_label: str
    count: int
    total_ms: float
    avg_ms: float
    min_ms: float
    max_ms: float


class ItemKind(Enum):
    SINGLE = "single"
    GROUP = "group"


@dataclass(frozen=True)
class RenderItem:
    """
    One row of a rendered report: either a single measurement or a group.

    Renderers read ``label`` and ``duration_ms`` and branch on ``kind`` only
    when they need the group statistics.
    """
    kind: ItemKind
    measurement: Optional[Measurement] = None
    group: Optional[GroupedMeasurement] = None

    @classmethod
    def single(cls, measurement: Measurement) -> "RenderItem":
        return cls(kind=ItemKind.SINGLE, measurement=measurement)

    @classmethod
    def grouped(cls, group: GroupedMeasurement) -> "RenderItem":
        return cls(kind=ItemKind.GROUP, group=group)

    @property
    def is_group(self) -> bool:
        return self.kind is ItemKind.GROUP

    @property
    def label(self) -> str:
        if self.kind is ItemKind.GROUP:
            return self.group.name
        return self.measurement.label

    @property
    def duration_ms(self) -> float:
        """Displayed duration; the average for groups."""
        if self.kind is ItemKind.GROUP:
            return self.group.avg_ms
        return self.measurement.duration_ms


@dataclass(frozen=True)
class FilterConfig:
    """
    Smart filtering configuration.

    A stage is active purely based on its flag; the threshold only matters
    while the flag is set. All thresholds are in milliseconds.
    """
    show_slow_only: bool = False
    slow_threshold_ms: float = 0.0
    hide_ultra_fast: bool = False
    ultra_fast_threshold_ms: float = 0.0
    group_similar: bool = False
    similar_threshold_ms: float = 0.0

    @classmethod
    def from_thresholds(
        cls,
        show_slow_only: Optional[float] = None,
        hide_ultra_fast: Optional[float] = None,
        group_similar: Optional[float] = None
    ) -> "FilterConfig":
        """
        Build a config where each present threshold enables its stage.

        Args:
            show_slow_only: Keep only spans at least this slow (ms)
            hide_ultra_fast: Drop spans faster than this (ms)
            group_similar: Fold spans within this distance of a seed (ms)

        Returns:
            FilterConfig instance
        """
        return cls(
            show_slow_only=show_slow_only is not None,
            slow_threshold_ms=show_slow_only or 0.0,
            hide_ultra_fast=hide_ultra_fast is not None,
            ultra_fast_threshold_ms=hide_ultra_fast or 0.0,
            group_similar=group_similar is not None,
            similar_threshold_ms=group_similar or 0.0,
        )

    @property
    def any_active(self) -> bool:
        return self.show_slow_only or self.hide_ultra_fast or self.group_similar


@dataclass(frozen=True)
class CallerInfo:
    """Location where a tracer was created, supplied by the caller."""
    file: str
    line: int
    function: str = ""

    @property
    def short_description(self) -> str:
        """File name and line, e.g. ``handlers.py:42``."""
        return f"{os.path.basename(self.file)}:{self.line}"

    @property
    def full_description(self) -> str:
        if not self.function:
            return self.short_description
        return f"{self.short_description} in {self.function}"


@dataclass(frozen=True)
class RenderContext:
    """
    Everything a renderer needs, captured once at render time.

    Args:
        name: Tracer name
        total_ms: Total trace duration at render time
        measurements: Raw measurements excluding "End", for summary stats
        items: Smart filter output, the rows to display
        active_filters: Descriptions of the enabled filter stages
        caller: Where the tracer was created, if known
        color: Emit ANSI colors
    """
    name: str
    total_ms: float
    measurements: Tuple[Measurement, ...]
    items: Tuple[RenderItem, ...]
    active_filters: Tuple[str, ...] = ()
    caller: Optional[CallerInfo] = None
    color: bool = True

    def percent_of_total(self, duration_ms: float) -> float:
        if self.total_ms <= 0:
            return 0.0
        return duration_ms / self.total_ms * 100

    def slowest(self) -> Optional[Measurement]:
        """Slowest raw measurement; the first one wins ties."""
        slowest = None
        for m in self.measurements:
            if slowest is None or m.duration_ms > slowest.duration_ms:
                slowest = m
        return slowest
