"""
Result builder for machine-readable trace reports.
"""

from typing import Any, Dict

from ..core.types import RenderContext
from ..formatters.color_rules import speed_class
from ..formatters.time_formatter import format_time


def prepare_results(context: RenderContext) -> Dict[str, Any]:
    """
    Convert a render context to a structured dict for JSON output.

    Spans are the filtered rows, not the raw measurements, so the span count
    always matches what the other styles display.

    Args:
        context: RenderContext captured by the tracer

    Returns:
        Dictionary ready for json.dumps()
    """
    results: Dict[str, Any] = {
        'tracer_name': context.name,
        'total_duration': format_time(context.total_ms),
        'total_ms': context.total_ms,
    }

    if context.caller is not None:
        results['caller_info'] = {
            'file': context.caller.short_description,
            'full_path': context.caller.file,
            'line': context.caller.line,
            'function': context.caller.function,
        }

    results['original_count'] = len(context.measurements)
    results['filtered_count'] = len(context.items)
    results['active_filters'] = list(context.active_filters)

    spans = []
    for item in context.items:
        span = {
            'name': item.label,
            'duration': format_time(item.duration_ms),
            'ms': item.duration_ms,
            'percent': round(context.percent_of_total(item.duration_ms), 2),
            'color_class': speed_class(item.duration_ms),
        }
        if item.is_group:
            span['label'] = item.group.seed_label
            span['count'] = item.group.count
            span['min_ms'] = item.group.min_ms
            span['max_ms'] = item.group.max_ms
        spans.append(span)

    results['spans'] = spans
    return results
