from taskline.pipeline import Pipeline, RunResult, Task, TaskError, TaskOutcome

__all__ = ["Pipeline", "Task", "TaskOutcome", "RunResult", "TaskError"]
