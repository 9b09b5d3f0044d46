"""Processors for captured trace reports."""

from .report_reader import ReportReader
from .aggregator import SpanAggregator

__all__ = [
    "ReportReader",
    "SpanAggregator",
]
