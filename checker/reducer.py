"""
Collection of per-submission results from concurrently finishing work items.
"""

import threading

from .models import AggregateReport, TaskResult


class ResultReducer:
    """
    Folds the results of finished work items into an AggregateReport.

    fold() may be called from several worker threads at once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: AggregateReport = {}

    def fold(self, results: list[TaskResult]) -> None:
        """
        Append a work item's results under their submission names.

        Args:
            results: Results produced by one work item.
        """
        with self._lock:
            for result in results:
                self._results.setdefault(result.name, []).append(result)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def snapshot(self) -> AggregateReport:
        """Return a copy of the results folded so far, in completion order."""
        with self._lock:
            return {name: list(results) for name, results in self._results.items()}

    def finalize(self) -> AggregateReport:
        """
        Return the aggregate with every submission's results in natural order.

        Returns:
            Mapping of submission name to results sorted by submission name,
            then by original task order.
        """
        with self._lock:
            return {name: sorted(results) for name, results in self._results.items()}
