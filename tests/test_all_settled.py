"""Tests for all_settled."""

import pytest

from settle import ResultRecord, all_settled
from fakes import ManualTask, delayed_failure, reject_later, resolve_later


@pytest.mark.asyncio
async def test_records_follow_input_order() -> None:
    records = await all_settled([
        resolve_later(1, 0.01),
        reject_later("Whoops!", 0.02),
        resolve_later(3, 0.03),
    ])
    assert [r.to_dict() for r in records] == [
        {"status": "fulfilled", "value": 1},
        {"status": "rejected", "reason": "Whoops!"},
        {"status": "fulfilled", "value": 3},
    ]


@pytest.mark.asyncio
async def test_never_rejects_when_everything_fails() -> None:
    error = RuntimeError("down")
    records = await all_settled([delayed_failure(error, 0.01), reject_later("also down", 0.02)])
    assert records == [ResultRecord.failed(error), ResultRecord.failed("also down")]
    assert all(r.is_rejected for r in records)


def test_empty_input_fulfills_synchronously() -> None:
    outcome = all_settled([])
    assert outcome.state == "fulfilled"
    assert outcome.value == []


def test_waits_for_every_task() -> None:
    a, b = ManualTask(), ManualTask()
    outcome = all_settled([a, b])

    b.fail("b failed")
    assert outcome.pending
    a.succeed("a")

    assert outcome.value == [ResultRecord.ok("a"), ResultRecord.failed("b failed")]
    assert outcome.value[0].is_fulfilled


def test_first_notification_per_task_wins() -> None:
    a, b = ManualTask(), ManualTask()
    outcome = all_settled([a, b])

    a.succeed("first")
    a.fail("second")
    assert outcome.pending

    b.succeed("b")
    a.succeed("third")
    assert outcome.value == [ResultRecord.ok("first"), ResultRecord.ok("b")]
