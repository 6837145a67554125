"""Tests for combinator tracing."""

from settle import CombinatorConfig, Outcome, Trace, all_, any_, race
from fakes import ManualTask


def test_all_records_begin_tasks_and_settlement() -> None:
    trace = Trace()
    a, b = ManualTask(), ManualTask()
    all_([a, b], trace=trace)
    b.succeed("b")
    a.succeed("a")

    actions = [ev.action for ev in trace.get_events()]
    assert actions == ["all_begin", "task_settled", "task_settled", "all_settled"]

    begin = trace.find_all("all_begin")[0]
    assert begin.info == {"tasks": 2}
    assert [ev.info["index"] for ev in trace.find_all("task_settled")] == [1, 0]
    assert trace.find_all("all_settled")[0].info == {"status": "fulfilled"}
    assert trace.as_tree() == {None: [0], 0: [1, 2, 3]}


def test_late_completions_still_traced() -> None:
    trace = Trace()
    a, b = ManualTask(), ManualTask()
    race([a, b], trace=trace)
    a.fail("boom")
    b.succeed("late")

    actions = [ev.action for ev in trace.get_events()]
    assert actions == ["race_begin", "task_settled", "race_settled", "task_settled"]
    assert trace.find_all("race_settled")[0].info == {"status": "rejected"}


def test_task_events_can_be_disabled() -> None:
    trace = Trace()
    config = CombinatorConfig(trace_tasks=False, name="lookup")
    any_([Outcome.rejected("x"), Outcome.fulfilled("y")], config=config, trace=trace)

    actions = [ev.action for ev in trace.get_events()]
    assert actions == ["any_begin", "any_settled"]
    assert trace.find_all("any_begin")[0].info == {"tasks": 2, "name": "lookup"}


def test_disabled_trace_records_nothing() -> None:
    trace = Trace(enabled=False)
    all_([1, 2], trace=trace)
    assert len(trace) == 0


def test_clear_resets_ids() -> None:
    trace = Trace()
    all_([], trace=trace)
    assert len(trace) == 2
    trace.clear()
    assert len(trace) == 0
    assert trace.record("x") == 0
