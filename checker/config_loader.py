"""
Configuration loader for the CheckApp system.

Handles parsing and validation of YAML configuration files.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .config import (
    BACKGROUND_TIMEOUT_SECONDS,
    DEFAULT_BINARIES_DIR,
    ERROR_MARKERS,
    FIELD_PATTERN,
    SUBMISSION_PATTERN,
    TIME_END_MARKER,
    TIME_START_MARKER,
)
from .models import CheckOptions, ReportLabels


class CheckerConfig(BaseModel):
    """
    Configuration model for a checking run.
    """
    tasks_dir: Path = Field(..., description="Directory with submitted task files; the report is written here")
    fields_dir: Optional[Path] = Field(None, description="Directory with task definition (field) files")
    submission_pattern: str = Field(SUBMISSION_PATTERN, description="Glob for submitted task files")
    field_pattern: str = Field(FIELD_PATTERN, description="Glob for task definition files")
    binaries_dir: Path = Field(DEFAULT_BINARIES_DIR, description="Directory with the patcher and 2D-model programs")
    scratch_dir: Optional[Path] = Field(None, description="Parent directory for scratch copies")

    options: CheckOptions = Field(default_factory=CheckOptions, description="Patcher and runner switches")
    max_workers: Optional[int] = Field(None, ge=1, description="Worker limit (background mode only)")
    timeout_seconds: float = Field(BACKGROUND_TIMEOUT_SECONDS, gt=0, description="Runner timeout in background mode")
    error_markers: list[str] = Field(
        default_factory=lambda: list(ERROR_MARKERS), min_length=1, description="Substrings marking an error"
    )
    time_start_marker: str = Field(TIME_START_MARKER, min_length=1, description="Runner text before the elapsed time")
    time_end_marker: str = Field(TIME_END_MARKER, min_length=1, description="Runner text after the elapsed time")
    labels: ReportLabels = Field(default_factory=ReportLabels, description="Localized report words")
    verbose: bool = Field(False, description="Enable verbose output")

    @property
    def resolved_fields_dir(self) -> Path:
        return self.fields_dir or self.tasks_dir

    @property
    def time_markers(self) -> tuple[str, str]:
        return (self.time_start_marker, self.time_end_marker)


def load_config(config_path: Path) -> CheckerConfig:
    """
    Load configuration from a YAML file.

    Relative paths are resolved against the directory of the file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        CheckerConfig object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
        ValidationError: If config data is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"{config_path}: top-level value must be a mapping, got {type(config_data).__name__}")

    config_dir = config_path.parent
    for path_field in ["tasks_dir", "fields_dir", "binaries_dir", "scratch_dir"]:
        if config_data.get(path_field):
            path = Path(config_data[path_field]).expanduser()
            if not path.is_absolute():
                path = config_dir / path
            config_data[path_field] = path

    return CheckerConfig(**config_data)
