"""
Checking of a single submission against its task definitions.

Every task definition goes through the same two steps on a scratch copy of
the submission: the patcher applies the task definition, then the runner
executes the patched submission and reports the elapsed time.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Iterable, Protocol

from .config import (
    DEFAULT_BINARIES_DIR,
    DEFAULT_ERROR_MARKER,
    ERROR_MARKERS,
    NO_TIME,
    PATCHER_NAME,
    RUNNER_NAME,
    SCRATCH_PREFIX,
    TIME_END_MARKER,
    TIME_START_MARKER,
)
from .models import ProcessOutcome, TaskResult, WorkItem
from .options import executable_path
from .process_runner import ProcessRunner


class Runner(Protocol):
    def run(self, program: str, args: list[str]) -> ProcessOutcome: ...


def is_error_message(message: str, markers: Iterable[str] = ERROR_MARKERS) -> bool:
    """
    Check whether diagnostic text reports an error.

    Args:
        message: Diagnostic text of a process step.
        markers: Case-sensitive substrings that mark an error, usually
            translations of "Error". The English marker is always checked,
            since failure texts of this package are written in English.

    Returns:
        True if any marker occurs anywhere in the text.
    """
    return any(marker in message for marker in (DEFAULT_ERROR_MARKER, *markers))


def extract_time(
    message: str,
    start_marker: str = TIME_START_MARKER,
    end_marker: str = TIME_END_MARKER,
) -> str:
    """
    Extract the elapsed time from the runner's diagnostic text.

    The time is taken from three characters after the first start marker up
    to the character before the first end marker, e.g. "1.50" from
    "completed in 1.50 sec!".

    Args:
        message: Diagnostic text of the runner.
        start_marker: Text preceding the time.
        end_marker: Text following the time.

    Returns:
        The time text, or "-" if either marker is missing.
    """
    start_index = message.find(start_marker)
    end_index = message.find(end_marker)
    if start_index == -1 or end_index == -1:
        return NO_TIME

    start = start_index + 3
    end = end_index - 1
    if end < start:
        return message[start:]
    return message[start:end]


class TaskEvaluator:
    """
    Runs the patch and execute steps for every task definition of a WorkItem.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        binaries_dir: Path = DEFAULT_BINARIES_DIR,
        scratch_dir: Path | None = None,
        error_markers: Iterable[str] = ERROR_MARKERS,
        time_markers: tuple[str, str] = (TIME_START_MARKER, TIME_END_MARKER),
        platform: str | None = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            runner: Process runner used for both steps.
            binaries_dir: Directory containing the patcher and runner programs.
            scratch_dir: Parent of the per-submission scratch directories.
                Defaults to the system temporary directory.
            error_markers: Substrings that mark diagnostic text as an error.
            time_markers: Localized texts before and after the elapsed time.
            platform: Host platform name, used for the executable suffix.
            verbose: Print failed steps.
        """
        self.runner = runner or ProcessRunner(verbose=verbose)
        self.patcher = executable_path(binaries_dir, PATCHER_NAME, platform)
        self.model = executable_path(binaries_dir, RUNNER_NAME, platform)
        self.scratch_dir = scratch_dir
        self.error_markers = tuple(error_markers)
        self.time_markers = time_markers
        self.verbose = verbose

    def is_error(self, message: str) -> bool:
        return is_error_message(message, self.error_markers)

    def failed(self, outcome: ProcessOutcome) -> bool:
        """A step failed if it did not run to completion or reported an error."""
        return outcome.failure is not None or self.is_error(outcome.text)

    def evaluate(self, item: WorkItem) -> list[TaskResult]:
        """
        Check one submission against all of its task definitions.

        Args:
            item: Submission, task definitions and process options.

        Returns:
            One TaskResult per task definition, in task definition order.
            Failures are recorded in the results, never raised.
        """
        try:
            with tempfile.TemporaryDirectory(
                prefix=SCRATCH_PREFIX, dir=self.scratch_dir
            ) as scratch:
                return [
                    self._check_field(item, index, field, Path(scratch))
                    for index, field in enumerate(item.field_paths)
                ]
        except OSError as e:
            print(f"  Warning: scratch directory for {item.name} failed: {e}")
            return [
                self._error_result(item, index, field, f"Error: scratch directory failed ({e})")
                for index, field in enumerate(item.field_paths)
            ]

    def _check_field(
        self, item: WorkItem, index: int, field: Path, scratch: Path
    ) -> TaskResult:
        patched = scratch / item.submission_path.name
        try:
            shutil.copy2(item.submission_path, patched)
        except OSError as e:
            print(f"  Warning: could not copy {item.submission_path}: {e}")
            return self._error_result(item, index, field, f"Error: scratch copy failed ({e})")

        patch = self.runner.run(
            self.patcher, [str(patched), *item.patcher_options, str(field.resolve())]
        )
        if self.failed(patch):
            if self.verbose:
                print(f"  Failed to patch {item.name} with {field.name}: {patch.text}")
            return self._error_result(item, index, field, patch.text)

        execution = self.runner.run(self.model, [str(patched), *item.runner_options])
        if self.failed(execution):
            if self.verbose:
                print(f"  Failed to run {item.name} on {field.name}: {execution.text}")
            return self._error_result(item, index, field, execution.text)

        return TaskResult(
            name=item.name,
            task=field.name,
            task_index=index,
            time=extract_time(execution.text, *self.time_markers),
            error=execution.text,
        )

    def _error_result(self, item: WorkItem, index: int, field: Path, message: str) -> TaskResult:
        return TaskResult(
            name=item.name,
            task=field.name,
            task_index=index,
            time=NO_TIME,
            error=message,
        )
