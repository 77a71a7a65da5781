"""
Execution of the external patcher and runner programs.

Runs a program on the host machine, capturing its diagnostic stream
regardless of the exit code.
"""

import subprocess
from pathlib import Path

from .config import BACKGROUND_FLAG, BACKGROUND_TIMEOUT_SECONDS
from .models import FailureKind, ProcessOutcome


class ProcessRunner:
    """
    Runs one external program and reports its stderr text.

    The exit code is never consulted: whether a step failed is decided
    later by looking for error markers in the returned text.
    """

    def __init__(
        self,
        timeout_seconds: float = BACKGROUND_TIMEOUT_SECONDS,
        timeout_flag: str = BACKGROUND_FLAG,
        cwd: Path | None = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize the process runner.

        Args:
            timeout_seconds: Wall-clock ceiling for calls that arm the timeout.
            timeout_flag: Argument whose presence arms the timeout.
            cwd: Working directory for the started processes.
            verbose: Print every command and its failures.
        """
        self.timeout_seconds = timeout_seconds
        self.timeout_flag = timeout_flag
        self.cwd = cwd
        self.verbose = verbose

    def timeout_for(self, args: list[str]) -> float | None:
        """Return the timeout for a call, or None when it is not armed."""
        if self.timeout_flag in args:
            return self.timeout_seconds
        return None

    def run(self, program: str, args: list[str]) -> ProcessOutcome:
        """
        Run a program and wait for it to exit.

        Args:
            program: Path of the executable.
            args: Arguments passed to the executable.

        Returns:
            ProcessOutcome with the captured stderr, or a failure message
            when the process could not be started or timed out.
        """
        cmd = [program, *args]
        timeout = self.timeout_for(args)

        if self.verbose:
            print(f"  Executing: {' '.join(cmd)}")

        try:
            process = subprocess.run(
                cmd,
                cwd=str(self.cwd) if self.cwd else None,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            if self.verbose:
                print(f"  Warning: {program} did not finish within {timeout}s")
            return ProcessOutcome(
                text=f"Error: not finished within {timeout} seconds",
                failure=FailureKind.TIMEOUT,
            )
        except OSError as e:
            if self.verbose:
                print(f"  Warning: could not start {program}: {e}")
            return ProcessOutcome(
                text=f"Error: not started ({e})",
                failure=FailureKind.SPAWN_FAILURE,
            )

        return ProcessOutcome(text=process.stderr or "")
