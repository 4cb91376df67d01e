from .executor import DETECT_OS, Orchestrator, TaskRunner
from .types import Outcome, OutcomeKind, RunContext, RunResult, Task, TaskResult

__all__ = [
    "DETECT_OS",
    "Orchestrator",
    "TaskRunner",
    "Outcome",
    "OutcomeKind",
    "RunContext",
    "RunResult",
    "Task",
    "TaskResult",
]
