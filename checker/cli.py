"""
CheckApp: Batch checking of student task files with patcher + 2D-model

Usage:
  checkapp [--config=PATH]
  checkapp (-h | --help)

Options:
  --config=PATH  Path to YAML configuration file [default: checker_config.yml].
  -h --help      Show this screen.
"""

from docopt import docopt
import sys
from pathlib import Path

from .batch import find_fields, find_submissions, run_batch
from .config_loader import CheckerConfig, load_config
from .evaluator import is_error_message
from .models import AggregateReport
from .report import ReportBuilder
from .scheduler import CancelToken


def print_progress(completed: int, total: int) -> None:
    """
    Print a one-line progress indicator.

    Args:
        completed: Number of submissions checked so far.
        total: Number of submissions in the batch.
    """
    end = "\n" if completed == total else ""
    print(f"\r  [{completed}/{total}] submissions checked", end=end, flush=True)


def print_summary(aggregate: AggregateReport, error_markers: list[str]) -> None:
    """
    Print a summary of the checked batch to console.

    Args:
        aggregate: Results keyed by submission name.
        error_markers: Substrings marking a result as failed.
    """
    print("\n" + "=" * 60)
    print("CHECK COMPLETE")
    print("=" * 60)
    print(f"Total submissions checked: {len(aggregate)}")

    fully_passed = 0
    for name in sorted(aggregate):
        results = aggregate[name]
        passed = sum(1 for r in results if not is_error_message(r.error, error_markers))
        if passed == len(results):
            fully_passed += 1
        status = "+" if passed == len(results) else "-"
        print(f"  [{status}] {name}: {passed}/{len(results)}")

    if aggregate:
        print(f"Fully passed: {fully_passed}/{len(aggregate)} ({100*fully_passed/len(aggregate):.1f}%)")


def run_check_pipeline(config: CheckerConfig) -> AggregateReport | None:
    """
    Run the complete checking pipeline.

    Args:
        config: Loaded run configuration.

    Returns:
        Results keyed by submission name, or None if nothing was checked.
    """
    print(f"Scanning {config.tasks_dir} for submissions...")
    submissions = find_submissions(config.tasks_dir, config.submission_pattern)
    print(f"Found {len(submissions)} submissions")

    fields_dir = config.resolved_fields_dir
    fields = find_fields(fields_dir, config.field_pattern)
    print(f"Found {len(fields)} fields in {fields_dir}")

    if not submissions:
        print("No submissions found!")
        return None
    if not fields:
        print("No fields found!")
        return None

    if config.verbose:
        for field in fields:
            print(f"  - {field.name}")

    print("\nA check is performed...")
    token = CancelToken()
    aggregate = run_batch(
        submissions,
        fields,
        config.options,
        progress=print_progress,
        cancel_token=token,
        max_workers=config.max_workers,
        binaries_dir=config.binaries_dir,
        scratch_dir=config.scratch_dir,
        timeout_seconds=config.timeout_seconds,
        error_markers=config.error_markers,
        time_markers=config.time_markers,
        verbose=config.verbose,
    )

    if aggregate is None:
        print("\nCheck cancelled, no report created.")
        return None

    print("Creating a report...")
    builder = ReportBuilder(labels=config.labels, error_markers=config.error_markers)
    report_path = builder.write(aggregate, config.tasks_dir)
    if report_path:
        print(f"  Report: {report_path}")

    print_summary(aggregate, config.error_markers)
    return aggregate


def main() -> int:
    """
    Main CLI entrypoint.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    arguments = docopt(__doc__)
    config_path = Path(arguments["--config"])

    if not config_path.exists():
        print(f"Error: Configuration file not found at {config_path}")
        return 1

    try:
        config = load_config(config_path)
        print(f"Loaded configuration from {config_path}")
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    if not config.tasks_dir.is_dir():
        print(f"Error: Tasks directory not found: {config.tasks_dir}")
        return 1

    if not config.resolved_fields_dir.is_dir():
        print(f"Error: Fields directory not found: {config.resolved_fields_dir}")
        return 1

    try:
        aggregate = run_check_pipeline(config)
    except Exception as e:
        print(f"\nError: {e}")
        if config.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0 if aggregate is not None else 1


if __name__ == "__main__":
    sys.exit(main())
