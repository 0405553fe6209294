from dataclasses import dataclass, field
from typing import Union


@dataclass
class TaskConfig:
    name: str
    kind: str
    command: str | None = None
    paths: list[str] = field(default_factory=list)
    copies: dict[str, str] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None

    def describe(self) -> str:
        match self.kind:
            case "run":
                return f"run {self.command}"
            case "mkdir":
                return "mkdir " + " ".join(self.paths)
            case "copy":
                return "copy " + ", ".join(f"{s} -> {d}" for s, d in self.copies.items())
            case _:
                return self.kind


@dataclass(frozen=True)
class GroupRef:
    group: str


Entry = Union[TaskConfig, GroupRef]


@dataclass
class JobConfig:
    name: str
    entries: list[Entry]
    description: str = ""
    fail_fast: bool | None = None


@dataclass
class ProjectConfig:
    jobs: dict[str, JobConfig]
    groups: dict[str, list[Entry]] = field(default_factory=dict)
    vars: dict[str, str] = field(default_factory=dict)
    fail_fast: bool = True

    def __iter__(self):
        for job_name in sorted(self.jobs):
            yield self.jobs[job_name]

    def __len__(self):
        return len(self.jobs)

    def has_job(self, name: str) -> bool:
        return name in self.jobs

    def get_job(self, name: str) -> JobConfig:
        if not self.has_job(name):
            raise KeyError(name)

        return self.jobs[name]

    def job_names(self) -> list[str]:
        return sorted(self.jobs.keys())


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
