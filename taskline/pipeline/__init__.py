from .pipeline import Pipeline
from .types import RunResult, Task, TaskError, TaskOutcome, TaskResult

__all__ = ["Pipeline", "Task", "TaskOutcome", "TaskResult", "RunResult", "TaskError"]
