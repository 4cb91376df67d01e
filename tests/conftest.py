from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import pytest

from sysmaint.executor import RunContext
from sysmaint.report import ReportSink
from sysmaint.system import CommandResult, CommandRunner, OsIdentity

FIXED_TIME = datetime(2024, 3, 5, 4, 30, 0, tzinfo=timezone.utc)


class ScriptedRunner(CommandRunner):
    """
    CommandRunner double: returns scripted results, records every call.

    Commands that were not scripted succeed with empty output.
    """

    def __init__(self, tools: Sequence[str] = ()):
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        self.tools = set(tools)
        self._scripts: dict[tuple[str, ...], CommandResult] = {}

    def script(
        self,
        command: str,
        *args: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self._scripts[(command, *args)] = CommandResult(
            command, tuple(args), returncode, stdout.encode(), stderr.encode()
        )

    def run(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        key = (command, *args)
        self.calls.append(key)
        if key in self._scripts:
            return self._scripts[key]
        return CommandResult(command, tuple(args), 0, b"", b"")

    def available(self, tool: str) -> bool:
        return tool in self.tools


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def sink(tmp_path: Path, stream: io.StringIO) -> ReportSink:
    s = ReportSink(
        tmp_path / "report.log", tag="test_maint", stream=stream, clock=lambda: FIXED_TIME
    )
    yield s
    s.close()


@pytest.fixture
def ubuntu() -> OsIdentity:
    return OsIdentity(
        name="ubuntu", version="22.04", kernel="5.15.0-91-generic", like=("debian",)
    )


@pytest.fixture
def context(runner: ScriptedRunner, tmp_path: Path, ubuntu: OsIdentity) -> RunContext:
    return RunContext(
        runner=runner,
        report_path=tmp_path / "report.log",
        privileged=True,
        os=ubuntu,
    )
