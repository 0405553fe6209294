from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union


class TaskError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


@dataclass(frozen=True)
class TaskOutcome:
    ok: bool
    returncode: int = 0
    output: str = ""
    detail: str = ""

    @classmethod
    def success(cls, output: str = "") -> TaskOutcome:
        return cls(True, 0, output, "")

    @classmethod
    def failure(cls, detail: str, returncode: int = 1, output: str = "") -> TaskOutcome:
        return cls(False, returncode, output, detail)

    @classmethod
    def coerce(cls, value: TaskOutcome | bool) -> TaskOutcome:
        if isinstance(value, TaskOutcome):
            return value
        if isinstance(value, bool):
            return cls.success() if value else cls.failure("task reported failure")
        raise TypeError(
            f"Task action must return a bool or TaskOutcome, got {type(value)}"
        )


Action = Callable[[], Union[TaskOutcome, bool]]


@dataclass(frozen=True)
class Task:
    name: str
    action: Action

    def __post_init__(self) -> None:
        if not callable(self.action):
            raise TypeError(f"{self.name}: action must be callable")


@dataclass(frozen=True)
class TaskResult:
    index: int
    name: str
    outcome: TaskOutcome
    duration_s: float

    @property
    def ok(self) -> bool:
        return self.outcome.ok


@dataclass(frozen=True)
class RunResult:
    order: list[str]
    results: list[TaskResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def failed(self) -> list[TaskResult]:
        return [r for r in self.results if not r.ok]

    @property
    def failure(self) -> TaskResult | None:
        for result in self.results:
            if not result.ok:
                return result
        return None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def detail(self) -> str:
        failure = self.failure
        return failure.outcome.detail if failure is not None else ""

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
