"""
Report renderers, one pure function per output style.

Every renderer takes a RenderContext and returns the full report as a single
string; the tracer writes it to the sink in one call.
"""

import json
from typing import Callable, Dict, List

from ..core.types import OutputStyle, RenderContext
from ..web.result_builder import prepare_results
from .color_rules import (
    BLUE,
    BOLD,
    BRIGHT_BLACK,
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    YELLOW,
    Palette,
    progress_color,
)
from .time_formatter import format_time

Renderer = Callable[[RenderContext], str]

# Detailed style column widths
INDEX_WIDTH = 3
OPERATION_WIDTH = 30
DURATION_WIDTH = 15
PERCENT_WIDTH = 8
BAR_WIDTH = 12
PERCENT_PER_BLOCK = 8


def _truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[:max(width - 3, 0)] + "..."
    return text


def _centered(text: str, width: int) -> str:
    """Pad text to sit in the middle of a bordered line of ``width``."""
    padding = max((width - len(text) - 2) // 2, 1)
    remaining = max(width - len(text) - padding - 2, 1)
    return " " * padding + text + " " * remaining


def _join(lines: List[str]) -> str:
    return "\n".join(lines) + "\n"


def progress_bar(percentage: float, width: int = BAR_WIDTH - 1) -> str:
    """
    Build a fixed-width bar with one block per 8% of the total.

    Args:
        percentage: Share of the total trace time
        width: Number of characters in the bar

    Returns:
        Bar such as "███░░░░░░░░"
    """
    filled = int(percentage / PERCENT_PER_BLOCK)
    filled = min(max(filled, 0), width)
    return "█" * filled + "░" * (width - filled)


def render_colorful(context: RenderContext) -> str:
    """Boxed two-column report with per-span duration colors."""
    palette = Palette(context.color)
    name_width = 35
    width = name_width + 25 + 4

    top = "┌" + "─" * (width - 2) + "┐"
    separator = "├" + "─" * (width - 2) + "┤"
    bottom = "└" + "─" * (width - 2) + "┘"

    lines = [palette.paint(top, CYAN, BOLD)]
    lines.append(palette.paint(f"│{_centered('🚀 ' + context.name, width)}│", YELLOW, BOLD))
    if context.caller is not None:
        caller = f"📍 File: {context.caller.short_description}"
        lines.append(palette.paint(f"│{_centered(caller, width)}│", BRIGHT_BLACK))
    lines.append(palette.paint(separator, CYAN, BOLD))

    total_label = "⏱️  Total Time:"
    lines.append(palette.paint(
        f"│ {total_label:<{name_width}} │ {format_time(context.total_ms)}", GREEN, BOLD
    ))
    lines.append(palette.paint(separator, CYAN))
    lines.append(palette.paint(f"│ {'📋 Span':<{name_width}} │ ⏰ Duration", MAGENTA, BOLD))
    lines.append(palette.paint(separator, CYAN))

    for item in context.items:
        label = _truncate(item.label, name_width)
        duration = item.duration_ms
        lines.append(
            "│ " + palette.duration(f"{label:<{name_width}}", duration)
            + " │ " + palette.duration(format_time(duration), duration)
        )

    lines.append(palette.paint(bottom, CYAN, BOLD))
    return _join(lines)


def render_minimal(context: RenderContext) -> str:
    """Compact tree listing with the total on the title line."""
    palette = Palette(context.color)
    name_width = 35
    width = name_width + 25 + 4

    top = "┌" + "─" * (width - 2) + "┐"
    separator = "├" + "─" * (width - 2) + "┤"
    bottom = "└" + "─" * (width - 2) + "┘"

    title = _truncate("⚡ " + context.name, name_width)
    lines = [palette.paint(top, CYAN, BOLD)]
    lines.append(palette.paint(
        f"│ {title:<{name_width}} │ {format_time(context.total_ms)}", CYAN, BOLD
    ))
    if context.caller is not None:
        caller = _truncate(f"📍 File: {context.caller.short_description}", name_width)
        lines.append(palette.paint(f"│ {caller:<{name_width}} │", BRIGHT_BLACK))
    lines.append(palette.paint(separator, CYAN))

    for item in context.items:
        label = _truncate("  └─ " + item.label, name_width)
        duration = item.duration_ms
        lines.append(
            "│ " + palette.duration(f"{label:<{name_width}}", duration)
            + " │ " + palette.duration(format_time(duration), duration)
        )

    lines.append(palette.paint(bottom, CYAN, BOLD))
    return _join(lines)


def render_detailed(context: RenderContext) -> str:
    """
    Full report: summary block, breakdown with percentages and progress bars,
    and a footer describing active filters.
    """
    palette = Palette(context.color)
    width = INDEX_WIDTH + OPERATION_WIDTH + DURATION_WIDTH + PERCENT_WIDTH + BAR_WIDTH + 12

    top = "╔" + "═" * (width - 2) + "╗"
    separator = "╠" + "═" * (width - 2) + "╣"
    thin_separator = "╟" + "─" * (width - 2) + "╢"
    bottom = "╚" + "═" * (width - 2) + "╝"

    lines = [palette.paint(top, BLUE, BOLD)]
    lines.append(palette.paint(f"║{_centered('🎯 TRACE: ' + context.name, width)}", MAGENTA, BOLD))
    lines.append(palette.paint(separator, BLUE, BOLD))

    # Summary
    lines.append(palette.paint("║ 📊 SUMMARY", GREEN, BOLD))
    lines.append("║ • Total Execution Time: " + palette.paint(format_time(context.total_ms), GREEN, BOLD))
    lines.append("║ • Number of Spans: " + palette.paint(str(len(context.measurements)), BLUE, BOLD))

    slowest = context.slowest()
    if slowest is not None:
        lines.append("║ • Slowest Operation: " + palette.paint(_truncate(slowest.label, 25), RED, BOLD))
        lines.append("║ • Slowest Duration: " + palette.paint(format_time(slowest.duration_ms), RED, BOLD))

    if context.caller is not None:
        lines.append("║ • File: " + palette.paint(context.caller.full_description, BRIGHT_BLACK, BOLD))

    lines.append(palette.paint(separator, BLUE, BOLD))

    # Breakdown
    lines.append(palette.paint("║ 🔍 DETAILED BREAKDOWN", MAGENTA, BOLD))
    lines.append(palette.paint(thin_separator, BLUE, BOLD))
    header = (
        f"║ {'#':>{INDEX_WIDTH}} │ {'Operation':<{OPERATION_WIDTH - 1}} │ "
        f"{'Duration':>{DURATION_WIDTH - 2}} │ {'Percent':>{PERCENT_WIDTH - 2}} │ "
        f"{'Progress':<{BAR_WIDTH - 1}}"
    )
    lines.append(palette.paint(header, MAGENTA, BOLD))
    lines.append(palette.paint(thin_separator, CYAN))

    for index, item in enumerate(context.items, start=1):
        duration = item.duration_ms
        percentage = context.percent_of_total(duration)

        name = item.label
        if item.is_group:
            name = "📦 " + name
        name = _truncate(name, OPERATION_WIDTH - 1)

        duration_text = f"{format_time(duration):>{DURATION_WIDTH - 2}}"
        percent_text = f"{percentage:.1f}%"
        lines.append(
            f"║ {index:>{INDEX_WIDTH}} │ "
            + palette.duration(f"{name:<{OPERATION_WIDTH - 1}}", duration) + " │ "
            + palette.duration(duration_text, duration) + " │ "
            + palette.duration(f"{percent_text:>{PERCENT_WIDTH - 2}}", duration) + " │ "
            + palette.paint(progress_bar(percentage), progress_color(percentage))
        )

    if context.active_filters:
        lines.append(palette.paint(thin_separator, CYAN))
        filter_info = (
            f"🔍 Filtered: {len(context.items)}/{len(context.measurements)} spans"
            f" | Active: {', '.join(context.active_filters)}"
        )
        lines.append("║ " + palette.paint(filter_info, BRIGHT_BLACK))

    lines.append(palette.paint(bottom, BLUE, BOLD))
    return _join(lines)


def render_table(context: RenderContext) -> str:
    """Three-column table with a total row and a summary line underneath."""
    palette = Palette(context.color)
    index_width = 4
    name_width = 45
    duration_width = 20
    width = index_width + name_width + duration_width + 3

    top = "┌" + "─" * index_width + "┬" + "─" * name_width + "┬" + "─" * duration_width + "┐"
    separator = "├" + "─" * index_width + "┼" + "─" * name_width + "┼" + "─" * duration_width + "┤"
    bottom = "└" + "─" * index_width + "┴" + "─" * name_width + "┴" + "─" * duration_width + "┘"

    lines = [palette.paint(top, BLUE, BOLD)]
    lines.append(palette.paint(f"│{_centered('🚀 ' + context.name, width)}", MAGENTA, BOLD))
    if context.caller is not None:
        caller = f"📍 File: {context.caller.short_description}"
        lines.append(palette.paint(f"│{_centered(caller, width)}", BRIGHT_BLACK))
    lines.append(palette.paint(separator, BLUE, BOLD))

    lines.append(
        "│" + palette.paint(f" {'No':<2} ", MAGENTA, BOLD)
        + "│" + palette.paint(f" {'Span Name':<{name_width - 1}}", MAGENTA, BOLD)
        + "│" + palette.paint(" Duration", MAGENTA, BOLD)
    )
    lines.append(palette.paint(separator, CYAN))

    total_label = "📊 TOTAL EXECUTION TIME"
    lines.append(
        "│" + " " * index_width
        + "│" + palette.paint(f" {total_label:<{name_width - 1}}", GREEN, BOLD)
        + "│ " + palette.duration(format_time(context.total_ms), context.total_ms)
    )
    lines.append(palette.paint(separator, CYAN))

    for index, item in enumerate(context.items, start=1):
        duration = item.duration_ms
        label = _truncate(item.label, name_width - 2)
        lines.append(
            f"│ {index:>{index_width - 2}} │ "
            + palette.duration(f"{label:<{name_width - 1}}", duration)
            + "│ " + palette.duration(format_time(duration), duration)
        )

    lines.append(palette.paint(bottom, BLUE, BOLD))
    lines.append("")

    summary = f"📈 Spans: {len(context.items)}"
    slowest = context.slowest()
    if slowest is not None:
        summary += f" | 🐌 Slowest: {slowest.label} ({format_time(slowest.duration_ms)})"
    lines.append(palette.paint(summary, BRIGHT_BLACK))
    return _join(lines)


def render_json(context: RenderContext) -> str:
    """Single pretty-printed JSON object; never colored."""
    return json.dumps(prepare_results(context), indent=2, ensure_ascii=False) + "\n"


RENDERERS: Dict[OutputStyle, Renderer] = {
    OutputStyle.COLORFUL: render_colorful,
    OutputStyle.MINIMAL: render_minimal,
    OutputStyle.DETAILED: render_detailed,
    OutputStyle.TABLE: render_table,
    OutputStyle.JSON: render_json,
}


def get_renderer(style: OutputStyle) -> Renderer:
    """Look up the renderer for a style; DEFAULT and unknown styles get detailed."""
    return RENDERERS.get(style, render_detailed)


def render(style: OutputStyle, context: RenderContext) -> str:
    return get_renderer(style)(context)
