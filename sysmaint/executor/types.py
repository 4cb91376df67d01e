from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from sysmaint.report import SummaryEntry
from sysmaint.system import UNKNOWN_OS, CommandRunner, OsIdentity


class OutcomeKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    detail: str

    @classmethod
    def success(cls, detail: str) -> Outcome:
        return cls(OutcomeKind.SUCCESS, detail)

    @classmethod
    def failure(cls, detail: str) -> Outcome:
        return cls(OutcomeKind.FAILURE, detail)

    @classmethod
    def skipped(cls, reason: str) -> Outcome:
        return cls(OutcomeKind.SKIPPED, reason)


@dataclass(frozen=True)
class RunContext:
    """Facts established once per run, read by every task."""

    runner: CommandRunner
    report_path: Path
    privileged: bool = False
    os: OsIdentity = UNKNOWN_OS


@dataclass(frozen=True)
class Task:
    name: str
    body: Callable[[RunContext], Outcome]
    precondition: Callable[[RunContext], bool] | None = None
    skip_reason: str = "precondition not met"

    def applies(self, context: RunContext) -> bool:
        return self.precondition is None or self.precondition(context)


@dataclass(frozen=True)
class TaskResult:
    task_name: str
    outcome: Outcome
    summary: SummaryEntry
    duration_s: float


@dataclass(frozen=True)
class RunResult:
    results: list[TaskResult]
    report_path: Path

    @property
    def order(self) -> list[str]:
        return [r.task_name for r in self.results]

    @property
    def outcomes(self) -> list[Outcome]:
        return [r.outcome for r in self.results]

    @property
    def summary(self) -> list[SummaryEntry]:
        return [r.summary for r in self.results]

    @property
    def failed(self) -> list[str]:
        return self._named(OutcomeKind.FAILURE)

    @property
    def skipped(self) -> list[str]:
        return self._named(OutcomeKind.SKIPPED)

    def _named(self, kind: OutcomeKind) -> list[str]:
        return [r.task_name for r in self.results if r.outcome.kind is kind]
