"""Tests for traversal traces."""

from pipekit import Evidence, Trace, emit, lift, run_effect
from pipekit import prelude as P
from pipekit.laws import transcript


def test_trace_records_in_order():
    trace = Trace()
    assert trace.record("emit", 1) == 0
    assert trace.record("done") == 1
    assert len(trace) == 2
    assert trace.keys() == [("emit", 1), ("done", None)]


def test_disabled_trace_records_nothing():
    trace = Trace(enabled=False)
    assert trace.record("emit", 1) is None
    assert len(trace) == 0


def test_find_all_and_clear():
    trace = Trace()
    P.fold(lambda acc, v: acc, None, lambda acc: acc, P.each([1, 2]), trace=trace)
    assert [event.payload for event in trace.find_all("emit")] == [1, 2]
    trace.clear()
    assert trace.get_events() == []


def test_evidence_key_ignores_bookkeeping():
    first = Evidence("emit", id=0, payload="v")
    second = Evidence("emit", id=7, payload="v")
    assert first != second
    assert first.key() == second.key() == ("emit", "v")


def test_run_effect_records_effects_and_result():
    trace = Trace()
    assert run_effect(lift(lambda: "ok"), trace=trace) == "ok"
    assert trace.keys() == [("effect", None), ("done", "ok")]


def test_transcript_accepts_a_trace():
    """Transcript events land in the caller's trace."""
    trace = Trace()
    events = transcript(emit("a"), downstream=[None], trace=trace)
    assert [event.key() for event in trace.get_events()] == events


def test_transcript_truncates_infinite_steps():
    events = transcript(P.repeat_m(lambda: 0), downstream=[None] * 10, max_events=3)
    assert events == [("emit", 0), ("emit", 0), ("emit", 0), ("truncated", 3)]


def test_transcript_ignores_earlier_events_in_a_reused_trace():
    trace = Trace()
    first = transcript(emit("a"), downstream=[None], trace=trace)
    second = transcript(P.repeat_m(lambda: 1), downstream=[None] * 5, max_events=2, trace=trace)
    assert first == [("emit", "a"), ("done", None)]
    assert second == [("emit", 1), ("emit", 1), ("truncated", 2)]
    assert trace.keys() == first + second


def test_transcript_with_disabled_trace_still_stops():
    events = transcript(P.repeat_m(lambda: 0), downstream=[None] * 10, max_events=2, trace=Trace(enabled=False))
    assert events == [("emit", 0), ("emit", 0), ("truncated", 2)]
