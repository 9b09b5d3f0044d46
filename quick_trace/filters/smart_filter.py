"""
Smart filtering for recorded spans: slow-only, hide-ultra-fast and
group-similar stages applied before rendering.
"""

from typing import List, Sequence

from ..core.types import FilterConfig, GroupedMeasurement, Measurement, RenderItem
from ..formatters.time_formatter import format_threshold


class SmartFilter:
    """Turns the raw measurement sequence into the rows actually rendered."""

    def __init__(self, config: FilterConfig):
        """
        Initialize with filter configuration.

        Args:
            config: FilterConfig instance
        """
        self.config = config

    def apply(self, measurements: Sequence[Measurement]) -> List[RenderItem]:
        """
        Run the three stages in order, each on the previous stage's output.

        Args:
            measurements: Recorded measurements, excluding the "End" span

        Returns:
            Ordered list of render items
        """
        if not measurements:
            return []

        filtered = self.filter_slow(measurements)
        filtered = self.filter_ultra_fast(filtered)

        if self.config.group_similar and filtered:
            return self.group_similar(filtered)
        return [RenderItem.single(m) for m in filtered]

    def filter_slow(self, measurements: Sequence[Measurement]) -> List[Measurement]:
        """Keep spans at least as slow as the slow threshold, if enabled."""
        if not self.config.show_slow_only:
            return list(measurements)
        return [m for m in measurements if m.duration_ms >= self.config.slow_threshold_ms]

    def filter_ultra_fast(self, measurements: Sequence[Measurement]) -> List[Measurement]:
        """Drop spans faster than the ultra-fast threshold, if enabled."""
        if not self.config.hide_ultra_fast:
            return list(measurements)
        return [m for m in measurements if m.duration_ms >= self.config.ultra_fast_threshold_ms]

    def group_similar(self, measurements: Sequence[Measurement]) -> List[RenderItem]:
        """
        Greedily group measurements whose durations are close to a seed.

        Each unprocessed measurement seeds a group, and every later unprocessed
        measurement within ``similar_threshold_ms`` of the seed's duration is
        folded into it. The comparison is always against the seed, never the
        running average, so a group can span up to twice the threshold.

        Example:
            Durations [45, 48, 44, 150] with threshold 10
            -> "a + 2 similar" (count 3, avg 45.67) and the 150 ms span alone

        Args:
            measurements: Measurements that survived the filter stages

        Returns:
            Render items in order of each group's seed
        """
        if not measurements:
            return []

        threshold = self.config.similar_threshold_ms
        processed = [False] * len(measurements)
        items = []

        for i, seed in enumerate(measurements):
            if processed[i]:
                continue
            processed[i] = True

            members = [seed]
            for j in range(i + 1, len(measurements)):
                if processed[j]:
                    continue
                candidate = measurements[j]
                if abs(seed.duration_ms - candidate.duration_ms) <= threshold:
                    members.append(candidate)
                    processed[j] = True

            if len(members) == 1:
                # Nothing absorbed: render as a plain span
                items.append(RenderItem.single(seed))
                continue

            absorbed = len(members) - 1
            if absorbed <= 2:
                name = f"{seed.label} + {absorbed} similar"
            else:
                name = f"{seed.label} + {absorbed} others"

            durations = [m.duration_ms for m in members]
            total = sum(durations)
            items.append(RenderItem.grouped(GroupedMeasurement(
                name=name,
                seed_label=seed.label,
                count=len(members),
                total_ms=total,
                avg_ms=total / len(members),
                min_ms=min(durations),
                max_ms=max(durations),
            )))

        return items

    def has_active_filters(self) -> bool:
        return self.config.any_active

    def active_filters(self) -> List[str]:
        """
        Describe the enabled stages, e.g. ``["slow>10ms", "group±5ms"]``.

        Returns:
            One entry per active stage, in stage order
        """
        filters = []
        if self.config.show_slow_only:
            filters.append(f"slow>{format_threshold(self.config.slow_threshold_ms)}")
        if self.config.hide_ultra_fast:
            filters.append(f"hide<{format_threshold(self.config.ultra_fast_threshold_ms)}")
        if self.config.group_similar:
            filters.append(f"group±{format_threshold(self.config.similar_threshold_ms)}")
        return filters
