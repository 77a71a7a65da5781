# tests/conftest.py
from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from checker.models import ProcessOutcome

# Patcher stand-in: fails when the field file asks for it.
PATCHER = """
import sys
field = open(sys.argv[-1], encoding="utf-8").read()
if "bad-field" in field:
    sys.stderr.write("Error: cannot patch " + sys.argv[-1])
"""

# Runner stand-in: behaves according to the submission copy's content.
RUNNER = """
import sys, time
content = open(sys.argv[1], encoding="utf-8").read().strip()
if content.startswith("ok "):
    sys.stderr.write("completed in " + content[3:] + " sec!")
    sys.exit(0)
if content == "hang":
    time.sleep(30)
sys.stderr.write("Error: invalid field")
sys.exit(1)
"""


def _script(path: Path, body: str) -> None:
    path.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture
def binaries_dir(tmp_path: Path) -> Path:
    """Directory holding executable fake patcher and 2D-model programs."""
    if sys.platform.startswith("win"):
        pytest.skip("fake binaries are shebang scripts")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _script(bin_dir / "patcher", PATCHER)
    _script(bin_dir / "2D-model", RUNNER)
    return bin_dir


@pytest.fixture
def tasks_dir(tmp_path: Path) -> Path:
    d = tmp_path / "group-42"
    d.mkdir()
    return d


@pytest.fixture
def fields_dir(tmp_path: Path) -> Path:
    d = tmp_path / "fields"
    d.mkdir()
    return d


class FakeRunner:
    """
    In-process runner. `answers` maps a program base name to a function
    (args) -> text or ProcessOutcome; every call is recorded.
    """

    def __init__(self, answers: dict | None = None) -> None:
        self.answers = answers or {}
        self.calls: list[tuple[str, list[str]]] = []

    def run(self, program: str, args: list[str]) -> ProcessOutcome:
        self.calls.append((program, list(args)))
        answer = self.answers.get(Path(program).name, lambda args: "")(args)
        if isinstance(answer, ProcessOutcome):
            return answer
        return ProcessOutcome(text=answer)


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    return FakeRunner
