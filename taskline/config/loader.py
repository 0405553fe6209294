import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    ConfigError,
    Entry,
    GroupRef,
    JobConfig,
    ProjectConfig,
    TaskConfig,
    UnsupportedConfigFormatError,
)

_TOP_LEVEL_KEYS = {"jobs", "groups", "vars", "fail_fast"}
_JOB_KEYS = {"tasks", "description", "fail_fast"}
_TASK_KINDS = ("run", "mkdir", "copy")
_TASK_KEYS = {"name", "env", "working_dir", *_TASK_KINDS}


def load_project(path: str | Path) -> ProjectConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return build_project_config(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: cannot read file") from exc

    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def build_project_config(raw: Mapping[str, Any]) -> ProjectConfig:
    for key in raw.keys():
        if key not in _TOP_LEVEL_KEYS:
            raise ConfigError(f"Can't process top-level field: {key}")

    if "jobs" not in raw:
        raise ConfigError("Missing 'jobs' field")

    if not isinstance(raw["jobs"], Mapping):
        raise ConfigError(f"'jobs' must be a mapping, got {type(raw['jobs'])}")

    if len(raw["jobs"]) < 1:
        raise ConfigError("There must be at least one job in the config file")

    fail_fast = _bool_field(raw, "fail_fast", "project", default=True)
    variables = _string_mapping(raw.get("vars", {}), "vars")

    groups: dict[str, list[Entry]] = {}
    raw_groups = raw.get("groups", {})
    if not isinstance(raw_groups, Mapping):
        raise ConfigError(f"'groups' must be a mapping, got {type(raw_groups)}")

    for group_name, items in raw_groups.items():
        name = _normalize_name(group_name, "Group", groups)
        groups[name] = _build_entries(f"group '{name}'", items)

    jobs: dict[str, JobConfig] = {}
    for job_name, fields in raw["jobs"].items():
        name = _normalize_name(job_name, "Job", jobs)
        jobs[name] = _build_job_config(name, fields)

    owners = [(f"job '{j.name}'", j.entries) for j in jobs.values()]
    owners += [(f"group '{g}'", entries) for g, entries in groups.items()]
    for owner, entries in owners:
        for entry in entries:
            if isinstance(entry, GroupRef) and entry.group not in groups:
                raise ConfigError(f"{owner} references unknown group '{entry.group}'")

    return ProjectConfig(jobs=jobs, groups=groups, vars=variables, fail_fast=fail_fast)


def _normalize_name(raw_name: Any, what: str, seen: Mapping[str, Any]) -> str:
    if not isinstance(raw_name, str):
        raise ConfigError(f"{what} name must be a string, got {type(raw_name)}")

    name = raw_name.strip()

    if len(name) < 1:
        raise ConfigError(f"A {what.lower()} name can't be empty")

    if name in seen:
        raise ConfigError(f"Duplicate {what.lower()} name after normalization: {name}")

    return name


def _build_job_config(name: str, fields: Any) -> JobConfig:
    if not isinstance(fields, Mapping):
        raise ConfigError(f"job '{name}' must be a mapping")

    for field in fields.keys():
        if field not in _JOB_KEYS:
            raise ConfigError(f"job '{name}': Can't process: {field}")

    if "tasks" not in fields:
        raise ConfigError(f"job '{name}': missing 'tasks'")

    description = fields.get("description", "")
    if not isinstance(description, str):
        raise ConfigError(f"job '{name}': The description should be a string")

    fail_fast = None
    if "fail_fast" in fields:
        fail_fast = _bool_field(fields, "fail_fast", f"job '{name}'", default=True)

    entries = _build_entries(f"job '{name}'", fields["tasks"])
    return JobConfig(name, entries, description.strip(), fail_fast)


def _build_entries(owner: str, items: Any) -> list[Entry]:
    if not isinstance(items, list):
        raise ConfigError(f"{owner}: Tasks should be in a list.")

    entries: list[Entry] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, Mapping):
            raise ConfigError(f"{owner}: task #{position} must be a mapping")

        if "group" in item:
            entries.append(_build_group_ref(owner, position, item))
        else:
            entries.append(_build_task_config(f"{owner}, task #{position}", item))

    return entries


def _build_group_ref(owner: str, position: int, item: Mapping[str, Any]) -> GroupRef:
    if len(item) != 1:
        raise ConfigError(f"{owner}: group reference #{position} takes no other field")

    group = item["group"]
    if not isinstance(group, str) or len(group.strip()) < 1:
        raise ConfigError(f"{owner}: group reference #{position} must be a non-empty string")

    return GroupRef(group.strip())


def _build_task_config(where: str, fields: Mapping[str, Any]) -> TaskConfig:
    for field in fields.keys():
        if field not in _TASK_KEYS:
            raise ConfigError(f"{where}: Can't process: {field}")

    kinds = [kind for kind in _TASK_KINDS if kind in fields]
    if len(kinds) != 1:
        raise ConfigError(f"{where}: exactly one of 'run', 'mkdir', 'copy' is required")

    kind = kinds[0]
    task = TaskConfig(name="", kind=kind)

    match kind:
        case "run":
            if not isinstance(fields["run"], str):
                raise ConfigError(f"{where}: The command should be a string")
            if len(fields["run"].strip()) < 1:
                raise ConfigError(f"{where}: Command missing")
            task.command = fields["run"].strip()
        case "mkdir":
            paths = fields["mkdir"]
            if isinstance(paths, str):
                paths = [paths]
            if not isinstance(paths, list) or len(paths) < 1:
                raise ConfigError(f"{where}: mkdir should be a path or a list of paths")
            for path in paths:
                if not isinstance(path, str) or len(path.strip()) < 1:
                    raise ConfigError(f"{where}: {path!r} is not a valid path")
                task.paths.append(path.strip())
        case "copy":
            task.copies = _string_mapping(fields["copy"], f"{where}: copy")
            if len(task.copies) < 1:
                raise ConfigError(f"{where}: copy needs at least one source")

    if kind != "run":
        for field in ("env", "working_dir"):
            if field in fields:
                raise ConfigError(f"{where}: '{field}' only applies to 'run' tasks")

    if "env" in fields:
        task.env = _string_mapping(fields["env"], f"{where}: env")

    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError(f"{where}: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError(f"{where}: Please provide a string or remove this field")

        task.working_dir = fields["working_dir"].strip()

    if "name" in fields:
        if not isinstance(fields["name"], str) or len(fields["name"].strip()) < 1:
            raise ConfigError(f"{where}: The name should be a non-empty string")
        task.name = fields["name"].strip()
    else:
        task.name = task.describe()

    return task


def _string_mapping(value: Any, where: str) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where} should be a mapping")

    out: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ConfigError(f"{where}: {key} should be a string")

        if len(key.strip()) < 1:
            raise ConfigError(f"{where}: A key can't be empty")

        if not isinstance(item, str):
            raise ConfigError(f"{where}: {item} should be a string")

        out[key.strip()] = item

    return out


def _bool_field(fields: Mapping[str, Any], key: str, where: str, *, default: bool) -> bool:
    value = fields.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: '{key}' should be a boolean")
    return value
