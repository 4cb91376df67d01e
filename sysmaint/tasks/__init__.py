from .registry import PIPELINE, TASK_NAMES, TaskSpec, build_pipeline, selected

__all__ = ["PIPELINE", "TASK_NAMES", "TaskSpec", "build_pipeline", "selected"]
