"""
Span aggregator across many trace reports.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..formatters.time_formatter import format_time


class SpanAggregator:
    """Folds JSON trace reports into per-span and per-tracer statistics."""

    def __init__(self, tracer_name: Optional[str] = None):
        """
        Initialize the aggregator.

        Args:
            tracer_name: If set, only reports from this tracer are counted
        """
        self.tracer_name = tracer_name
        self.span_stats: Dict[tuple, Dict] = defaultdict(
            lambda: {
                'count': 0,
                'total_ms': 0.0,
                'min_ms': None,
                'max_ms': 0.0,
                'trace_count': 0,
            }
        )
        self.tracer_stats: Dict[str, Dict] = defaultdict(
            lambda: {
                'trace_count': 0,
                'total_ms': 0.0,
                'max_ms': 0.0,
            }
        )

    def add_reports(self, reports: Iterable[Dict]) -> int:
        """
        Add reports to the running statistics.

        Args:
            reports: Report dictionaries (see ReportReader)

        Returns:
            Number of reports that were counted
        """
        added = 0
        for report in reports:
            if self.add_report(report):
                added += 1
        return added

    def add_report(self, report: Dict) -> bool:
        """
        Add one report.

        Grouped spans are keyed by their seed label and contribute their
        member count and total time, so a group of three 45 ms calls counts
        the same as three separate spans of that name.

        Args:
            report: Report dictionary

        Returns:
            True if the report was counted
        """
        tracer = report.get('tracer_name', 'Unknown')
        if self.tracer_name is not None and tracer != self.tracer_name:
            return False

        total_ms = float(report.get('total_ms', 0.0))
        tracer_entry = self.tracer_stats[tracer]
        tracer_entry['trace_count'] += 1
        tracer_entry['total_ms'] += total_ms
        tracer_entry['max_ms'] = max(tracer_entry['max_ms'], total_ms)

        seen_in_trace = set()
        for span in report.get('spans', []):
            # Groups carry their seed label so they fold into the plain span's row
            key = (tracer, span.get('label', span.get('name', 'Unknown Span')))
            avg_ms = float(span.get('ms', 0.0))
            count = int(span.get('count', 1))
            low = float(span.get('min_ms', avg_ms))
            high = float(span.get('max_ms', avg_ms))

            stats = self.span_stats[key]
            stats['count'] += count
            stats['total_ms'] += avg_ms * count
            stats['min_ms'] = low if stats['min_ms'] is None else min(stats['min_ms'], low)
            stats['max_ms'] = max(stats['max_ms'], high)
            if key not in seen_in_trace:
                stats['trace_count'] += 1
                seen_in_trace.add(key)

        return True

    def summarize(self, top: Optional[int] = None) -> List[Dict]:
        """
        Build the per-span summary sorted by total time, slowest first.

        Args:
            top: Keep only the first ``top`` rows

        Returns:
            List of row dictionaries with formatted times
        """
        rows = []
        for (tracer, name), stats in self.span_stats.items():
            avg_ms = stats['total_ms'] / stats['count'] if stats['count'] else 0.0
            rows.append({
                'tracer': tracer,
                'name': name,
                'count': stats['count'],
                'trace_count': stats['trace_count'],
                'total_ms': stats['total_ms'],
                'total_time_formatted': format_time(stats['total_ms']),
                'avg_ms': avg_ms,
                'avg_time_formatted': format_time(avg_ms),
                'min_ms': stats['min_ms'] or 0.0,
                'max_ms': stats['max_ms'],
            })

        rows.sort(key=lambda x: -x['total_ms'])
        if top is not None:
            rows = rows[:top]
        return rows

    def summarize_tracers(self) -> List[Dict]:
        """Per-tracer totals sorted by total time, slowest first."""
        rows = []
        for tracer, stats in self.tracer_stats.items():
            avg_ms = stats['total_ms'] / stats['trace_count'] if stats['trace_count'] else 0.0
            rows.append({
                'tracer': tracer,
                'trace_count': stats['trace_count'],
                'total_ms': stats['total_ms'],
                'avg_ms': avg_ms,
                'avg_time_formatted': format_time(avg_ms),
                'max_ms': stats['max_ms'],
                'max_time_formatted': format_time(stats['max_ms']),
            })
        rows.sort(key=lambda x: -x['total_ms'])
        return rows

    def to_markdown(self, top: Optional[int] = None) -> str:
        """
        Render both summaries as markdown tables.

        Args:
            top: Limit the span table to this many rows

        Returns:
            Markdown text
        """
        lines = ["# Trace Report Summary", "", "## Tracers", ""]
        lines.append("| Tracer | Traces | Avg Total | Max Total |")
        lines.append("|---|---:|---:|---:|")
        for row in self.summarize_tracers():
            lines.append(
                f"| {row['tracer']} | {row['trace_count']} | "
                f"{row['avg_time_formatted']} | {row['max_time_formatted']} |"
            )

        lines += ["", "## Spans", ""]
        lines.append("| Tracer | Span | Count | Traces | Total | Avg | Min | Max |")
        lines.append("|---|---|---:|---:|---:|---:|---:|---:|")
        for row in self.summarize(top):
            lines.append(
                f"| {row['tracer']} | {row['name']} | {row['count']} | {row['trace_count']} | "
                f"{row['total_time_formatted']} | {row['avg_time_formatted']} | "
                f"{format_time(row['min_ms'])} | {format_time(row['max_ms'])} |"
            )

        return "\n".join(lines) + "\n"
