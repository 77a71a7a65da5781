"""
Caller-facing entry points: discovering inputs and running a batch.
"""

from pathlib import Path
from typing import Iterable

from .config import (
    BACKGROUND_FLAG,
    BACKGROUND_TIMEOUT_SECONDS,
    DEFAULT_BINARIES_DIR,
    ERROR_MARKERS,
    FIELD_PATTERN,
    SUBMISSION_PATTERN,
    TIME_END_MARKER,
    TIME_START_MARKER,
)
from .evaluator import Runner, TaskEvaluator
from .models import AggregateReport, CheckOptions, WorkItem
from .options import patcher_options, runner_options
from .process_runner import ProcessRunner
from .scheduler import BatchScheduler, CancelToken, ProgressCallback, pool_size


def find_files(directory: Path, pattern: str) -> list[Path]:
    """
    Find the files matching a glob pattern in a directory.

    Args:
        directory: Directory to scan (not recursively).
        pattern: Glob pattern, e.g. "*.qrs".

    Returns:
        Matching files sorted by name; hidden files are skipped.
    """
    return sorted(
        path for path in directory.glob(pattern)
        if path.is_file() and not path.name.startswith(".")
    )


def find_submissions(tasks_dir: Path, pattern: str = SUBMISSION_PATTERN) -> list[Path]:
    return find_files(tasks_dir, pattern)


def find_fields(fields_dir: Path, pattern: str = FIELD_PATTERN) -> list[Path]:
    return find_files(fields_dir, pattern)


def build_work_items(
    submission_paths: Iterable[Path],
    field_paths: Iterable[Path],
    options: CheckOptions,
) -> list[WorkItem]:
    """
    Create one WorkItem per submission, each checked against every field.

    Args:
        submission_paths: Submitted task files.
        field_paths: Task definition files, in checking order.
        options: Switches translated into patcher and runner flags.

    Returns:
        Work items in submission order.

    Raises:
        ValueError: If two submissions share a file name.
    """
    fields = tuple(Path(p) for p in field_paths)
    patch_flags = tuple(patcher_options(options))
    run_flags = tuple(runner_options(options))

    items: list[WorkItem] = []
    seen: set[str] = set()
    for path in submission_paths:
        path = Path(path)
        if path.name in seen:
            raise ValueError(f"Duplicate submission name: {path.name}")
        seen.add(path.name)
        items.append(
            WorkItem(
                submission_path=path,
                field_paths=fields,
                patcher_options=patch_flags,
                runner_options=run_flags,
            )
        )
    return items


def run_batch(
    submission_paths: Iterable[Path],
    field_paths: Iterable[Path],
    options: CheckOptions | None = None,
    *,
    progress: ProgressCallback | None = None,
    cancel_token: CancelToken | None = None,
    max_workers: int | None = None,
    binaries_dir: Path = DEFAULT_BINARIES_DIR,
    scratch_dir: Path | None = None,
    timeout_seconds: float = BACKGROUND_TIMEOUT_SECONDS,
    error_markers: Iterable[str] = ERROR_MARKERS,
    time_markers: tuple[str, str] = (TIME_START_MARKER, TIME_END_MARKER),
    runner: Runner | None = None,
    verbose: bool = False,
) -> AggregateReport | None:
    """
    Check every submission against every task definition.

    Args:
        submission_paths: Submitted task files.
        field_paths: Task definition files, in checking order.
        options: Patcher and runner switches.
        progress: Called with (completed, total) as submissions finish.
        cancel_token: Token the caller may use to stop the run.
        max_workers: Worker limit; visible runs never use more than two.
        binaries_dir: Directory with the patcher and 2D-model programs.
        scratch_dir: Parent directory for scratch copies.
        timeout_seconds: Runner timeout in background mode.
        error_markers: Substrings marking diagnostic text as an error.
        time_markers: Runner texts before and after the elapsed time.
        runner: Process runner replacing the default subprocess one.
        verbose: Print commands and failed steps.

    Returns:
        Results keyed by submission name and sorted by task order, or None
        if the run was cancelled.
    """
    options = options or CheckOptions()
    items = build_work_items(submission_paths, field_paths, options)

    evaluator = TaskEvaluator(
        runner=runner or ProcessRunner(
            timeout_seconds=timeout_seconds,
            timeout_flag=BACKGROUND_FLAG,
            verbose=verbose,
        ),
        binaries_dir=binaries_dir,
        scratch_dir=scratch_dir,
        error_markers=error_markers,
        time_markers=time_markers,
        verbose=verbose,
    )
    scheduler = BatchScheduler(
        evaluator,
        max_workers=pool_size(options.background, max_workers),
        progress=progress,
    )
    return scheduler.run(items, cancel_token)
