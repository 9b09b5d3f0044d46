"""
Unit tests for quick_trace.core.tracer module.
"""
import io
import logging

import pytest

from quick_trace import (
    OutputStyle,
    Tracer,
    TracerOptions,
    create_tracer,
    with_custom_condition,
    with_group_similar,
    with_min_total_duration,
    with_output_style,
    with_show_slow_only,
)
from quick_trace.core.types import ItemKind, Measurement
from quick_trace.filters.print_conditions import always


class TestMarking:
    """Tests for mark() and the measurement accessors."""

    def test_mark_records_elapsed_since_previous_mark(self, make_tracer, run_spans):
        tracer = make_tracer()
        run_spans(tracer, [("load", 10), ("parse", 25.5), ("save", 3)])

        assert tracer.get_measurements() == [
            Measurement("load", 10.0),
            Measurement("parse", 25.5),
            Measurement("save", 3.0),
        ]

    def test_end_appends_end_span(self, make_tracer, run_spans, clock):
        tracer = make_tracer(silent=True)
        run_spans(tracer, [("a", 1), ("b", 2)])
        clock.advance(4)
        tracer.end()

        all_measurements = tracer.get_all_measurements()
        assert len(all_measurements) == 3
        assert all_measurements[-1] == Measurement("End", 4.0)
        assert len(tracer.get_measurements()) == 2

    def test_caller_marked_end_is_hidden(self, make_tracer, run_spans):
        """Any span labeled "End" is excluded, even one the caller marked."""
        tracer = make_tracer()
        run_spans(tracer, [("a", 1), ("End", 2), ("b", 3)])

        assert [m.label for m in tracer.get_measurements()] == ["a", "b"]
        assert len(tracer.get_all_measurements()) == 3

    def test_accessors_return_copies(self, make_tracer, run_spans):
        tracer = make_tracer()
        run_spans(tracer, [("a", 1)])

        tracer.get_measurements().clear()
        tracer.get_all_measurements().clear()

        assert len(tracer.get_measurements()) == 1

    def test_total_duration_reads_clock_now(self, make_tracer, clock):
        tracer = make_tracer()

        clock.advance(12.5)
        first = tracer.get_total_duration()
        clock.advance(7.5)
        second = tracer.get_total_duration()

        assert first == 12.5
        assert second == 20.0

    def test_total_duration_covers_all_spans(self, make_tracer, run_spans):
        tracer = make_tracer(silent=True)
        run_spans(tracer, [("a", 10), ("b", 20)])
        tracer.end()

        total = tracer.get_total_duration()
        assert total == pytest.approx(sum(m.duration_ms for m in tracer.get_all_measurements()))

    def test_empty_label_is_allowed(self, make_tracer, run_spans):
        tracer = make_tracer()
        run_spans(tracer, [("", 1)])

        assert tracer.get_measurements()[0].label == ""


class TestDisabledAndSilent:
    """Tests for the enabled and silent switches."""

    def test_disabled_tracer_never_reads_clock(self, make_tracer, clock, sink):
        tracer = make_tracer(enabled=False)
        reads_after_init = clock.reads

        tracer.mark("a")
        tracer.mark("b")
        tracer.end()

        assert clock.reads == reads_after_init
        assert tracer.get_all_measurements() == []
        assert sink.getvalue() == ""

    def test_disable_at_runtime(self, make_tracer, run_spans, sink):
        tracer = make_tracer(print_condition=always())
        run_spans(tracer, [("a", 1)])
        tracer.set_enabled(False)
        run_spans(tracer, [("b", 1)])
        tracer.end()

        assert not tracer.is_enabled()
        assert [m.label for m in tracer.get_all_measurements()] == ["a"]
        assert sink.getvalue() == ""

    def test_silent_collects_but_does_not_print(self, make_tracer, run_spans, sink):
        tracer = make_tracer(silent=True, print_condition=always())
        run_spans(tracer, [("a", 500)])
        tracer.end()

        assert tracer.is_silent()
        assert len(tracer.get_all_measurements()) == 2
        assert sink.getvalue() == ""

    def test_unsilence_at_runtime(self, make_tracer, run_spans, sink):
        tracer = make_tracer(silent=True, print_condition=always())
        run_spans(tracer, [("a", 1)])
        tracer.set_silent(False)
        tracer.end()

        assert "🎯 TRACE: Test Tracer" in sink.getvalue()


class TestPrintGate:
    """Tests for when end() prints."""

    def test_default_gate_suppresses_fast_traces(self, make_tracer, run_spans, sink):
        tracer = make_tracer()
        run_spans(tracer, [("quick", 5)])
        tracer.end()

        assert sink.getvalue() == ""

    def test_default_gate_prints_slow_traces(self, make_tracer, run_spans, sink):
        tracer = make_tracer()
        run_spans(tracer, [("slow", 150)])
        tracer.end()

        assert "slow" in sink.getvalue()

    def test_min_total_duration_gate(self, make_tracer, run_spans, sink):
        fast = make_tracer(options=with_min_total_duration(50))
        run_spans(fast, [("work", 10)])
        fast.end()
        assert sink.getvalue() == ""

        slow = make_tracer(options=with_min_total_duration(50))
        run_spans(slow, [("work", 60)])
        slow.end()
        assert "work" in sink.getvalue()

    def test_custom_condition_sees_end_span(self, make_tracer, run_spans, sink):
        seen = []

        def condition(tracer):
            seen.append(len(tracer.get_all_measurements()))
            return False

        tracer = make_tracer(options=with_custom_condition(condition))
        run_spans(tracer, [("a", 1)])
        tracer.end()

        assert seen == [2]
        assert sink.getvalue() == ""

    def test_set_print_condition(self, make_tracer, run_spans, sink):
        tracer = make_tracer()
        condition = always()
        tracer.set_print_condition(condition)
        run_spans(tracer, [("a", 1)])
        tracer.end()

        assert tracer.get_print_condition() is condition
        assert "🎯 TRACE: Test Tracer" in sink.getvalue()

    def test_repeated_end_renders_again(self, make_tracer, run_spans, sink):
        tracer = make_tracer(print_condition=always(), output_style=OutputStyle.MINIMAL)
        run_spans(tracer, [("a", 1)])
        tracer.end()
        tracer.end()

        assert [m.label for m in tracer.get_all_measurements()] == ["a", "End", "End"]
        assert sink.getvalue().count("⚡ Test Tracer") == 2


class TestOutput:
    """Tests for rendering and writing."""

    def test_style_setter_accepts_names(self, make_tracer):
        tracer = make_tracer()
        tracer.set_output_style("table")

        assert tracer.get_output_style() is OutputStyle.TABLE

    def test_unknown_style_falls_back_to_default(self, make_tracer, caplog):
        """A misspelled style is logged and never raised into the caller."""
        tracer = make_tracer(output_style=OutputStyle.TABLE)

        with caplog.at_level(logging.WARNING, logger="quick_trace.core.types"):
            tracer.set_output_style("tabel")

        assert tracer.get_output_style() is OutputStyle.DEFAULT
        assert "Unknown output style 'tabel'" in caplog.text

    def test_render_with_unknown_style_uses_detailed(self, make_tracer, run_spans):
        tracer = make_tracer(output_style=OutputStyle.MINIMAL)
        run_spans(tracer, [("a", 1)])

        assert "🎯 TRACE: Test Tracer" in tracer.render("sideways")

    def test_render_with_explicit_style(self, make_tracer, run_spans):
        tracer = make_tracer(output_style=OutputStyle.MINIMAL)
        run_spans(tracer, [("a", 1)])

        assert tracer.render("json").lstrip().startswith("{")
        assert "⚡" in tracer.render()

    def test_writes_to_stdout_by_default(self, clock, capsys):
        tracer = Tracer("stdout tracer", TracerOptions(print_condition=always()), clock=clock)
        clock.advance(3)
        tracer.mark("step")
        tracer.end()

        assert "stdout tracer" in capsys.readouterr().out

    def test_closed_sink_is_logged_not_raised(self, clock, run_spans, caplog):
        sink = io.StringIO()
        sink.close()
        tracer = Tracer("broken", TracerOptions(print_condition=always()), clock=clock, stream=sink)
        run_spans(tracer, [("a", 1)])

        with caplog.at_level(logging.WARNING, logger="quick_trace.core.tracer"):
            tracer.end()

        assert "Could not write trace report" in caplog.text

    def test_filtered_items_and_active_filters(self, make_tracer, run_spans):
        tracer = make_tracer(show_slow_only=10, group_similar=5)
        run_spans(tracer, [("a", 1), ("b", 20), ("c", 22), ("d", 100)])

        items = tracer.filtered_items()
        assert [item.kind for item in items] == [ItemKind.GROUP, ItemKind.SINGLE]
        assert items[0].label == "b + 1 similar"
        assert tracer.has_active_filters()
        assert tracer.active_filters() == ["slow>10ms", "group±5ms"]
        assert tracer.filter_config.show_slow_only

    def test_repr(self, make_tracer):
        assert repr(make_tracer("svc")) == "Tracer(name='svc', spans=0, enabled=True, style=default)"


class TestContextManager:
    def test_with_block_ends_trace(self, make_tracer, run_spans, sink):
        with make_tracer(print_condition=always()) as tracer:
            run_spans(tracer, [("inside", 2)])

        assert tracer.get_all_measurements()[-1].label == "End"
        assert "inside" in sink.getvalue()

    def test_exceptions_propagate(self, make_tracer, run_spans):
        with pytest.raises(RuntimeError):
            with make_tracer(silent=True) as tracer:
                run_spans(tracer, [("a", 1)])
                raise RuntimeError("boom")

        assert tracer.get_all_measurements()[-1].label == "End"


class TestCreateTracer:
    def test_options_merged_left_to_right(self, clock, sink):
        tracer = create_tracer(
            "checkout",
            with_output_style("table"),
            with_show_slow_only(5),
            with_output_style("json"),
            with_group_similar(1),
            clock=clock,
            stream=sink,
        )

        assert tracer.name == "checkout"
        assert tracer.get_output_style() is OutputStyle.JSON
        assert tracer.active_filters() == ["slow>5ms", "group±1ms"]

    def test_no_options(self, clock):
        tracer = create_tracer("plain", clock=clock)

        assert tracer.is_enabled()
        assert not tracer.is_silent()
        assert tracer.get_output_style() is OutputStyle.DEFAULT
        assert not tracer.has_active_filters()
