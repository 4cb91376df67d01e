import logging
import time
from dataclasses import replace
from typing import Callable, Sequence

from sysmaint.report import Level, ReportSink
from sysmaint.system import UNKNOWN_OS, CommandRunner, OsIdentity, PrivilegeGuard

from .types import Outcome, OutcomeKind, RunContext, RunResult, Task, TaskResult

logger = logging.getLogger(__name__)

DETECT_OS = "detect-os"

_LEVELS = {
    OutcomeKind.SUCCESS: Level.INFO,
    OutcomeKind.SKIPPED: Level.INFO,
    OutcomeKind.FAILURE: Level.WARN,
}


class TaskRunner:
    """
    Runs a single task and records its outcome.

    Whatever the task does, exactly one log line and one summary line are
    written and an Outcome comes back. Exceptions raised by the task's own
    code become a Failure here and go no further.
    """

    def __init__(self, sink: ReportSink):
        self.sink = sink

    def execute(self, task: Task, context: RunContext) -> TaskResult:
        logger.info("running %s", task.name)
        start = time.monotonic()
        outcome = self._outcome(task, context)
        duration = time.monotonic() - start

        self.sink.log(
            _LEVELS[outcome.kind],
            f"{task.name}: {outcome.kind.value} ({duration:.1f}s)",
        )
        summary = self.sink.summary(outcome.detail)
        return TaskResult(task.name, outcome, summary, duration)

    def _outcome(self, task: Task, context: RunContext) -> Outcome:
        try:
            if not task.applies(context):
                return Outcome.skipped(task.skip_reason)

            outcome = task.body(context)
            if not isinstance(outcome, Outcome):
                raise TypeError(
                    f"task returned {type(outcome).__name__}, expected Outcome"
                )
            return outcome

        except Exception as exc:
            logger.debug("task %s raised", task.name, exc_info=True)
            return Outcome.failure(
                f"{task.name} failed unexpectedly: {type(exc).__name__}: {exc}"
            )


class Orchestrator:
    def __init__(
        self,
        tasks: Sequence[Task],
        *,
        sink: ReportSink,
        guard: PrivilegeGuard,
        runner: CommandRunner,
        probe: Callable[[], OsIdentity] | None = None,
    ):
        self.tasks = tuple(tasks)
        self.sink = sink
        self.guard = guard
        self.runner = runner
        self.probe = probe

    def run(self) -> RunResult:
        # Raises PermissionDenied before anything touches the report.
        self.guard.check()

        task_runner = TaskRunner(self.sink)
        results: list[TaskResult] = []
        context = RunContext(
            runner=self.runner, report_path=self.sink.path, privileged=True
        )

        if self.probe is not None:
            context, detected = self._detect(task_runner, context)
            results.append(detected)

        for task in self.tasks:
            results.append(task_runner.execute(task, context))

        self.sink.log(
            Level.INFO,
            f"System maintenance completed. Report saved to: {self.sink.path}",
        )
        self.sink.summary_block([r.summary for r in results])
        return RunResult(results, self.sink.path)

    def _detect(
        self, task_runner: TaskRunner, context: RunContext
    ) -> tuple[RunContext, TaskResult]:
        found: list[OsIdentity] = []

        def body(_: RunContext) -> Outcome:
            identity = self.probe()
            found.append(identity)
            return Outcome.success(f"Operating System: {identity}")

        result = task_runner.execute(Task(DETECT_OS, body), context)
        return replace(context, os=found[0] if found else UNKNOWN_OS), result
