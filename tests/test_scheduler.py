# tests/test_scheduler.py
from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from checker.models import TaskResult, WorkItem
from checker.scheduler import BatchScheduler, CancelToken, pool_size


class RecordingEvaluator:
    """Stands in for TaskEvaluator and tracks how many items run at once."""

    def __init__(self, delay: float = 0.0, fail_on: str | None = None) -> None:
        self.delay = delay
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.running = 0
        self.max_running = 0
        self._lock = threading.Lock()

    def evaluate(self, item: WorkItem) -> list[TaskResult]:
        with self._lock:
            self.calls.append(item.name)
            self.running += 1
            self.max_running = max(self.max_running, self.running)
        try:
            time.sleep(self.delay)
            if item.name == self.fail_on:
                raise RuntimeError("boom")
            return [
                TaskResult(name=item.name, task=f.name, task_index=i, time="1.00", error="")
                for i, f in enumerate(item.field_paths)
            ]
        finally:
            with self._lock:
                self.running -= 1


def _items(n: int, fields: tuple[str, ...] = ("t2.xml", "t1.xml")) -> list[WorkItem]:
    return [
        WorkItem(
            submission_path=Path(f"s{i:02d}.qrs"),
            field_paths=tuple(Path(f) for f in fields),
        )
        for i in range(n)
    ]


def test_pool_size() -> None:
    assert pool_size(background=False) == 2
    assert pool_size(background=False, max_workers=8) == 2
    assert pool_size(background=False, max_workers=1) == 1
    assert pool_size(background=True, max_workers=8) == 8
    assert pool_size(background=True) >= 1


def test_all_items_reduced() -> None:
    evaluator = RecordingEvaluator()
    scheduler = BatchScheduler(evaluator, max_workers=4)

    aggregate = scheduler.run(_items(5))

    assert aggregate is not None
    assert sorted(aggregate) == [f"s{i:02d}.qrs" for i in range(5)]
    for results in aggregate.values():
        assert [r.task for r in results] == ["t2.xml", "t1.xml"]


def test_concurrency_limit() -> None:
    evaluator = RecordingEvaluator(delay=0.05)
    scheduler = BatchScheduler(evaluator, max_workers=2)

    scheduler.run(_items(8))

    assert len(evaluator.calls) == 8
    assert evaluator.max_running <= 2


def test_progress_reports_every_item() -> None:
    seen: list[tuple[int, int]] = []
    scheduler = BatchScheduler(
        RecordingEvaluator(), max_workers=3, progress=lambda done, total: seen.append((done, total))
    )

    scheduler.run(_items(4))

    assert seen == [(0, 4), (1, 4), (2, 4), (3, 4), (4, 4)]


def test_cancel_before_dispatch() -> None:
    evaluator = RecordingEvaluator()
    token = CancelToken()
    token.cancel()

    aggregate = BatchScheduler(evaluator, max_workers=2).run(_items(3), token)

    assert aggregate is None
    assert evaluator.calls == []


def test_cancel_during_run_stops_dispatch() -> None:
    evaluator = RecordingEvaluator(delay=0.05)
    token = CancelToken()

    def progress(done: int, total: int) -> None:
        if done == 1:
            token.cancel()

    scheduler = BatchScheduler(evaluator, max_workers=1, progress=progress)
    aggregate = scheduler.run(_items(10), token)

    assert aggregate is None
    assert 1 <= len(evaluator.calls) <= 2
    assert evaluator.running == 0
    assert len(scheduler.reducer) >= 1


def test_unexpected_evaluator_failure_is_recorded() -> None:
    evaluator = RecordingEvaluator(fail_on="s01.qrs")
    aggregate = BatchScheduler(evaluator, max_workers=2).run(_items(3))

    assert aggregate is not None
    failed = aggregate["s01.qrs"]
    assert len(failed) == 2
    assert all("Error" in r.error and r.time == "-" for r in failed)
    assert all(r.error == "" for r in aggregate["s00.qrs"])


@pytest.mark.parametrize("workers", [1, 3])
def test_empty_batch(workers: int) -> None:
    assert BatchScheduler(RecordingEvaluator(), max_workers=workers).run([]) == {}


def test_interrupt_in_progress_callback_stops_dispatch() -> None:
    evaluator = RecordingEvaluator(delay=0.05)

    def progress(done: int, total: int) -> None:
        if done == 1:
            raise KeyboardInterrupt

    scheduler = BatchScheduler(evaluator, max_workers=1, progress=progress)
    aggregate = scheduler.run(_items(10))

    assert aggregate is None
    assert 1 <= len(evaluator.calls) <= 2
    assert evaluator.running == 0
