"""
Pydantic models for the CheckApp system.

Defines the work descriptors handed to the scheduler, the outcome of a single
external process call, the per-task results and the rows of the HTML report.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .config import NO_TIME


class CheckOptions(BaseModel):
    """
    Caller-facing switches that become patcher and runner flags.

    Attributes:
        reset_robot_position: Reset the robot position while patching.
        patch_field: Patch only the field of the submission.
        patch_world_project: Patch the world of the working project.
        close_on_success: Ask the runner to close after a successful run.
        background: Run the model without a window (enables the timeout).
        console: Ask the runner to print its messages to the console.
    """

    reset_robot_position: bool = Field(default=False, description="Reset robot position (--rrp)")
    patch_field: bool = Field(default=True, description="Patch the field only (-f)")
    patch_world_project: bool = Field(default=False, description="Patch the working project world (--wp)")
    close_on_success: bool = Field(default=True, description="Close the runner on success")
    background: bool = Field(default=True, description="Run without a visible window (-b)")
    console: bool = Field(default=False, description="Console mode (-c)")


class WorkItem(BaseModel):
    """
    One submission together with everything needed to check it.

    Attributes:
        submission_path: Path to the submitted task file.
        field_paths: Task definition files, in the order they are checked.
        patcher_options: Flags passed to the patcher between the two paths.
        runner_options: Flags passed to the runner after the submission path.
    """

    model_config = ConfigDict(frozen=True)

    submission_path: Path = Field(..., description="Submitted task file")
    field_paths: tuple[Path, ...] = Field(..., description="Task definition files")
    patcher_options: tuple[str, ...] = Field(default=(), description="Patcher flags")
    runner_options: tuple[str, ...] = Field(default=(), description="Runner flags")

    @property
    def name(self) -> str:
        return self.submission_path.name


class FailureKind(str, Enum):
    """Ways an external process call can fail before producing diagnostics."""

    SPAWN_FAILURE = "spawn_failure"
    TIMEOUT = "timeout"


class ProcessOutcome(BaseModel):
    """
    Result of one external process call.

    Attributes:
        text: Captured diagnostic stream, or a failure message.
        failure: Set when the process could not be started or did not finish.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Diagnostic (stderr) text or failure message")
    failure: FailureKind | None = Field(default=None, description="Structured failure, if any")


class TaskResult(BaseModel):
    """
    Outcome of checking one submission against one task definition.

    Results order naturally by submission name, then by the position of the
    task definition in the list it was checked against.

    Attributes:
        name: Submission file name.
        task: Task definition file name.
        task_index: Position of the task definition in the checked list.
        time: Elapsed time reported by the runner, or "-".
        error: Diagnostic text of the last process step that ran.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Submission identity")
    task: str = Field(..., description="Task definition identity")
    task_index: int = Field(default=0, ge=0, description="Original task order")
    time: str = Field(default=NO_TIME, description="Elapsed time text")
    error: str = Field(default="", description="Diagnostic text")

    def sort_key(self) -> tuple[str, int]:
        return (self.name, self.task_index)

    def __lt__(self, other: "TaskResult") -> bool:
        return self.sort_key() < other.sort_key()


# Submission name -> results for that submission
AggregateReport = dict[str, list[TaskResult]]


class ReportLabels(BaseModel):
    """
    Localizable words used in the HTML report.

    Attributes:
        complete: Status word for a passed task.
        error: Status word for a failed task.
        total: Template for the totals row, with {passed} and {total}.
        title: Heading shown before the batch directory name.
    """

    complete: str = Field(default="Complete", description="Status of a passed task")
    error: str = Field(default="Error", description="Status of a failed task")
    total: str = Field(default="Total {passed} of {total}", description="Totals row template")
    title: str = Field(default="Check report", description="Report heading")


class ReportRow(BaseModel):
    """
    A single rendered line of the report table.

    Attributes:
        css_class: Color class of the row, empty for uncolored rows.
        label: Submission name, totals label, or empty.
        task: Task definition identity.
        status: Localized "Complete" or "Error" word.
        time: Elapsed time text, or "-".
    """

    css_class: str = Field(default="", description="Row color class")
    label: str = Field(default="", description="Submission name or totals label")
    task: str = Field(..., description="Task definition identity")
    status: str = Field(..., description="Localized status word")
    time: str = Field(default=NO_TIME, description="Elapsed time text")
