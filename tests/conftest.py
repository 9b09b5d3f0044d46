"""
Pytest configuration and shared fixtures for quick_trace tests.
"""
import io

import pytest

from quick_trace import Tracer, TracerOptions
from quick_trace.core.types import Measurement


class FakeClock:
    """Deterministic nanosecond clock advanced by hand."""

    def __init__(self, start_ns: int = 1_000_000_000):
        self.now_ns = start_ns
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now_ns

    def advance(self, ms: float) -> None:
        self.now_ns += int(round(ms * 1_000_000))


@pytest.fixture
def clock():
    """Fresh fake clock for each test."""
    return FakeClock()


@pytest.fixture
def sink():
    """In-memory output sink."""
    return io.StringIO()


@pytest.fixture
def make_tracer(clock, sink):
    """Factory building tracers wired to the fake clock and sink."""
    def factory(name="Test Tracer", options=None, **fields):
        if options is None:
            options = TracerOptions(**fields)
        return Tracer(name, options, clock=clock, stream=sink)
    return factory


@pytest.fixture
def run_spans(clock):
    """Mark one span per (label, ms) pair, advancing the clock first."""
    def runner(tracer, spans):
        for label, ms in spans:
            clock.advance(ms)
            tracer.mark(label)
    return runner


@pytest.fixture
def sample_measurements():
    """Request-handler style spans of varied speed."""
    return [
        Measurement("parse request", 1.0),
        Measurement("auth", 5.0),
        Measurement("db query", 50.0),
        Measurement("render", 200.0),
    ]
