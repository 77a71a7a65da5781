"""
Configuration constants for the CheckApp system.
"""

from pathlib import Path


# External programs
PATCHER_NAME: str = "patcher"
RUNNER_NAME: str = "2D-model"
WINDOWS_EXECUTABLE_SUFFIX: str = ".exe"

# Execution configuration
BACKGROUND_TIMEOUT_SECONDS: int = 20
MAX_VISIBLE_WORKERS: int = 2

# Patcher flags
RESET_ROBOT_POSITION_FLAG: str = "--rrp"
PATCH_FIELD_FLAG: str = "-f"
PATCH_WORLD_PROJECT_FLAG: str = "--wp"
PATCH_WORLD_FLAG: str = "-w"

# Runner flags (the runner itself spells it "succes")
CLOSE_ON_SUCCESS_FLAG: str = "--close-on-succes"
BACKGROUND_FLAG: str = "-b"
CONSOLE_FLAG: str = "-c"

# Diagnostic text markers
DEFAULT_ERROR_MARKER: str = "Error"
ERROR_MARKERS: list[str] = [DEFAULT_ERROR_MARKER]
TIME_START_MARKER: str = "in"
TIME_END_MARKER: str = "sec!"
NO_TIME: str = "-"

# File patterns
SUBMISSION_PATTERN: str = "*.qrs"
FIELD_PATTERN: str = "*.xml"
SCRATCH_PREFIX: str = "tmp-"

# Report configuration
REPORT_FILENAME: str = "report.html"
REPORT_TIMESTAMP_FORMAT: str = "%H:%M %d.%m.%Y"
SUCCESS_CSS_CLASS: str = "green"
PARTIAL_CSS_CLASS: str = "yellow"
NO_DATA_CSS_CLASS: str = "black"

# Default paths (can be overridden via CLI)
DEFAULT_CONFIG_PATH: Path = Path("checker_config.yml")
DEFAULT_BINARIES_DIR: Path = Path(".")
