"""
Span recorder: marks named spans sequentially and renders a report at the end.
"""

import logging
import sys
import time
from typing import Callable, List, Optional, TextIO

from .options import TracerOptions, merge_options
from .types import (
    END_LABEL,
    CallerInfo,
    FilterConfig,
    Measurement,
    OutputStyle,
    RenderContext,
    RenderItem,
)
from ..filters.print_conditions import PrintCondition
from ..filters.smart_filter import SmartFilter
from ..formatters.renderers import render

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000.0


class Tracer:
    """
    Records the time between consecutive marks and prints a report on end().

    A tracer is meant to be driven by a single thread of control from
    construction through end(); it does no locking of its own.

    Example:
        tracer = Tracer("checkout", with_output_style("table"))
        load_cart()
        tracer.mark("load cart")
        charge_card()
        tracer.mark("charge card")
        tracer.end()
    """

    def __init__(
        self,
        name: str,
        options: Optional[TracerOptions] = None,
        clock: Optional[Callable[[], int]] = None,
        stream: Optional[TextIO] = None
    ):
        """
        Initialize the Tracer.

        Args:
            name: Name shown in the report header
            options: TracerOptions; unset fields take library defaults
            clock: Monotonic clock returning nanoseconds (default time.perf_counter_ns)
            stream: Output sink (default: sys.stdout, looked up at write time)
        """
        options = options or TracerOptions()

        self.name = name
        self._clock = clock or time.perf_counter_ns
        self._stream = stream

        # Measurement store
        self._measurements: List[Measurement] = []
        self._trace_start_ns = self._clock()
        self._last_mark_ns = self._trace_start_ns

        # Runtime-mutable state
        self._enabled = True if options.enabled is None else options.enabled
        self._silent = False if options.silent is None else options.silent
        self._output_style = options.output_style or OutputStyle.DEFAULT
        self._print_condition = options.build_print_condition()
        self._color = True if options.color is None else options.color

        # Fixed at construction
        self._caller = options.caller
        self._filter = SmartFilter(options.build_filter_config())

    def __enter__(self) -> "Tracer":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.end()
        return False

    def __repr__(self) -> str:
        return (f"Tracer(name={self.name!r}, spans={len(self._measurements)}, "
                f"enabled={self._enabled}, style={self._output_style.value})")

    def mark(self, label: str) -> None:
        """
        Record the time elapsed since the previous mark under ``label``.

        When disabled this returns before reading the clock.

        Args:
            label: Description of the work that just finished
        """
        if not self._enabled:
            return

        now = self._clock()
        self._measurements.append(Measurement(label, (now - self._last_mark_ns) / NS_PER_MS))
        self._last_mark_ns = now

    def end(self) -> None:
        """
        Close the trace with an "End" span and print the report if eligible.

        Calling end() again appends another "End" span and renders again.
        """
        if not self._enabled:
            return

        self.mark(END_LABEL)

        if self._silent:
            return

        if self._print_condition is not None and not self._print_condition(self):
            return

        self._write(self.render())

    def render(self, style: Optional[OutputStyle] = None) -> str:
        """
        Build the report without checking the print condition or writing it.

        Args:
            style: Style to render (default: the tracer's current style)

        Returns:
            Report text
        """
        style = OutputStyle.resolve(style) if style is not None else self._output_style
        return render(style, self.build_context())

    def build_context(self) -> RenderContext:
        """Capture the total duration and filtered rows for one render pass."""
        measurements = self.get_measurements()
        return RenderContext(
            name=self.name,
            total_ms=self.get_total_duration(),
            measurements=tuple(measurements),
            items=tuple(self._filter.apply(measurements)),
            active_filters=tuple(self._filter.active_filters()),
            caller=self._caller,
            color=self._color,
        )

    def _write(self, output: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        try:
            stream.write(output)
            stream.flush()
        except (OSError, ValueError) as e:
            # Closed or broken sinks must not take the host program down
            logger.warning("Could not write trace report for %r: %s", self.name, e)

    def filtered_items(self) -> List[RenderItem]:
        """Rows the report would show for the current measurements."""
        return self._filter.apply(self.get_measurements())

    def has_active_filters(self) -> bool:
        return self._filter.has_active_filters()

    def active_filters(self) -> List[str]:
        return self._filter.active_filters()

    # Accessors

    def get_measurements(self) -> List[Measurement]:
        """All recorded measurements except those labeled "End"."""
        return [m for m in self._measurements if m.label != END_LABEL]

    def get_all_measurements(self) -> List[Measurement]:
        return list(self._measurements)

    def get_total_duration(self) -> float:
        """Milliseconds since the tracer was created, read now."""
        return (self._clock() - self._trace_start_ns) / NS_PER_MS

    @property
    def filter_config(self) -> FilterConfig:
        return self._filter.config

    @property
    def caller(self) -> Optional[CallerInfo]:
        return self._caller

    # Runtime control

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    def set_silent(self, silent: bool) -> None:
        self._silent = silent

    def is_silent(self) -> bool:
        return self._silent

    def set_output_style(self, style) -> None:
        self._output_style = OutputStyle.resolve(style)

    def get_output_style(self) -> OutputStyle:
        return self._output_style

    def set_print_condition(self, condition: PrintCondition) -> None:
        self._print_condition = condition

    def get_print_condition(self) -> PrintCondition:
        return self._print_condition


def create_tracer(name: str, *options: Optional[TracerOptions], **kwargs) -> Tracer:
    """
    Create a tracer from option objects merged left to right.

    Args:
        name: Tracer name
        *options: TracerOptions, e.g. with_output_style("json"), production_mode()
        **kwargs: Passed to Tracer (clock, stream)

    Returns:
        New Tracer
    """
    return Tracer(name, merge_options(*options), **kwargs)
