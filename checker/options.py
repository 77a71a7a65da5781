"""
Translation of check options into command line flags for the external programs.
"""

import sys
from pathlib import Path

from .config import (
    BACKGROUND_FLAG,
    CLOSE_ON_SUCCESS_FLAG,
    CONSOLE_FLAG,
    PATCH_FIELD_FLAG,
    PATCH_WORLD_FLAG,
    PATCH_WORLD_PROJECT_FLAG,
    RESET_ROBOT_POSITION_FLAG,
    WINDOWS_EXECUTABLE_SUFFIX,
)
from .models import CheckOptions


def patcher_options(options: CheckOptions) -> list[str]:
    """
    Build the patcher flags.

    The field / working project / world selectors are mutually exclusive,
    and exactly one of them is always present.

    Args:
        options: Caller-supplied check options.

    Returns:
        Flags placed between the submission copy and the task definition path.
    """
    result: list[str] = []
    if options.reset_robot_position:
        result.append(RESET_ROBOT_POSITION_FLAG)

    if options.patch_field:
        result.append(PATCH_FIELD_FLAG)
    elif options.patch_world_project:
        result.append(PATCH_WORLD_PROJECT_FLAG)
    else:
        result.append(PATCH_WORLD_FLAG)

    return result


def runner_options(options: CheckOptions) -> list[str]:
    """
    Build the runner flags.

    Args:
        options: Caller-supplied check options.

    Returns:
        Flags placed after the submission copy path.
    """
    result: list[str] = []
    if options.close_on_success:
        result.append(CLOSE_ON_SUCCESS_FLAG)
    if options.background:
        result.append(BACKGROUND_FLAG)
    if options.console:
        result.append(CONSOLE_FLAG)
    return result


def executable_name(name: str, platform: str | None = None) -> str:
    """Append the platform executable suffix to a program name."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return name + WINDOWS_EXECUTABLE_SUFFIX
    return name


def executable_path(binaries_dir: Path, name: str, platform: str | None = None) -> str:
    return str(binaries_dir.resolve() / executable_name(name, platform))
