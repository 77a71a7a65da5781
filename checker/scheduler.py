"""
Parallel checking of a batch of submissions.

Each work item is checked by one worker of a thread pool owned by the run.
Results are folded into a ResultReducer as work items finish.
"""

import os
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable

from .config import MAX_VISIBLE_WORKERS
from .evaluator import TaskEvaluator
from .models import AggregateReport, TaskResult, WorkItem
from .reducer import ResultReducer

ProgressCallback = Callable[[int, int], None]


class CancelToken:
    """Thread-safe flag used to stop a running batch."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def pool_size(background: bool, max_workers: int | None = None) -> int:
    """
    Number of workers for a run.

    Args:
        background: Whether the runner works without a visible window.
        max_workers: Explicit limit, if configured.

    Returns:
        The explicit limit or the CPU count in background mode; at most
        two workers otherwise.
    """
    if background:
        return max(1, max_workers or os.cpu_count() or 1)
    return max(1, min(max_workers or MAX_VISIBLE_WORKERS, MAX_VISIBLE_WORKERS))


class BatchScheduler:
    """
    Maps a TaskEvaluator over a list of work items on a bounded thread pool.

    Cancellation is cooperative: once requested, no further work item is
    started, running ones finish normally and the run returns no report.
    """

    def __init__(
        self,
        evaluator: TaskEvaluator,
        max_workers: int,
        progress: ProgressCallback | None = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            evaluator: Evaluator shared by all workers (it keeps no run state).
            max_workers: Maximum number of work items checked at once.
            progress: Called with (completed, total) as work items finish.
        """
        self.evaluator = evaluator
        self.max_workers = max_workers
        self.progress = progress
        self.reducer = ResultReducer()

    def run(
        self, items: list[WorkItem], cancel_token: CancelToken | None = None
    ) -> AggregateReport | None:
        """
        Check every work item.

        Args:
            items: Work items to check.
            cancel_token: Token the caller may use to stop the run.

        Returns:
            The aggregate of all results, or None if the run was cancelled.
            Results folded before cancellation stay available through
            the reducer attribute.
        """
        token = cancel_token or CancelToken()
        self.reducer = ResultReducer()
        total = len(items)
        completed = 0
        self._report(completed, total)

        if token.cancelled:
            return None

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="checker"
        ) as pool:
            pending: set[Future] = {
                pool.submit(self._evaluate, item, token) for item in items
            }
            while pending:
                # Ctrl+C anywhere in collection, progress included, cancels the run
                try:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        if future.cancelled():
                            continue
                        results = future.result()
                        if results is None:
                            continue
                        self.reducer.fold(results)
                        completed += 1
                        self._report(completed, total)
                except KeyboardInterrupt:
                    token.cancel()
                    print("\nCancelling, waiting for running checks to finish...")

                if token.cancelled:
                    for future in pending:
                        future.cancel()

        if token.cancelled:
            return None
        return self.reducer.finalize()

    def _evaluate(self, item: WorkItem, token: CancelToken) -> list[TaskResult] | None:
        if token.cancelled:
            return None
        try:
            return self.evaluator.evaluate(item)
        except Exception as e:
            print(f"  Warning: checking {item.name} failed: {e}")
            return [
                TaskResult(name=item.name, task=field.name, task_index=index,
                           error=f"Error: check failed ({e})")
                for index, field in enumerate(item.field_paths)
            ]

    def _report(self, completed: int, total: int) -> None:
        if self.progress is not None:
            self.progress(completed, total)
