"""Tests for per-call settlement bookkeeping."""

from settle import Outcome, all_
from settle.combinators import Tally
from fakes import ManualTask


def test_record_reports_threshold() -> None:
    tally = Tally(3)
    assert tally.claim(0) is True
    assert tally.claim(0) is False
    assert tally.record(0, "a") is False
    assert tally.record(2, "c") is False
    assert tally.record(1, "b") is True
    assert tally.slots == ["a", "b", "c"]


def test_custom_threshold() -> None:
    tally = Tally(3, threshold=1)
    assert tally.record(1, "x") is True


def test_release_on_settlement_drops_slots() -> None:
    outcome = Outcome()
    tally = Tally(2)
    tally.release_on(outcome)
    tally.record(0, "kept until settlement")

    outcome.reject("done")
    assert tally.released
    assert tally.slots == []
    assert tally.record(1, "late") is False


def test_settled_combinator_value_survives_release() -> None:
    a, b = ManualTask(), ManualTask()
    outcome = all_([a, b])
    a.succeed(1)
    b.succeed(2)
    assert outcome.value == [1, 2]
