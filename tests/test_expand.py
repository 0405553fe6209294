import pytest

from taskline.config.types import GroupRef, JobConfig, ProjectConfig, TaskConfig
from taskline.graph.expand import expand_job
from taskline.graph.types import CycleError


def _t(name: str) -> TaskConfig:
    return TaskConfig(name=name, kind="run", command=f"echo {name}")


def _proj(jobs: dict[str, list], groups: dict[str, list] | None = None) -> ProjectConfig:
    """
    Entries are task names (str) or ("group", name) tuples.
    """

    def entries(items: list) -> list:
        return [GroupRef(i[1]) if isinstance(i, tuple) else _t(i) for i in items]

    return ProjectConfig(
        jobs={name: JobConfig(name, entries(items)) for name, items in jobs.items()},
        groups={name: entries(items) for name, items in (groups or {}).items()},
    )


def _names(tasks: list[TaskConfig]) -> list[str]:
    return [t.name for t in tasks]


def test_plain_job_keeps_order():
    project = _proj({"ci": ["c", "a", "b"]})
    assert _names(expand_job(project, "ci")) == ["c", "a", "b"]


def test_group_is_expanded_in_place():
    project = _proj(
        {"ci": ["first", ("group", "env"), "last"]},
        {"env": ["pull", "up"]},
    )
    assert _names(expand_job(project, "ci")) == ["first", "pull", "up", "last"]


def test_nested_groups():
    project = _proj(
        {"ci": [("group", "outer")]},
        {"outer": ["a", ("group", "inner"), "d"], "inner": ["b", "c"]},
    )
    assert _names(expand_job(project, "ci")) == ["a", "b", "c", "d"]


def test_group_used_twice_is_expanded_twice():
    project = _proj(
        {"ci": [("group", "wait"), "x", ("group", "wait")]},
        {"wait": ["sleep"]},
    )
    assert _names(expand_job(project, "ci")) == ["sleep", "x", "sleep"]


def test_empty_group_contributes_nothing():
    project = _proj({"ci": ["a", ("group", "none")]}, {"none": []})
    assert _names(expand_job(project, "ci")) == ["a"]


def test_self_cycle_detected():
    project = _proj({"ci": [("group", "a")]}, {"a": [("group", "a")]})
    with pytest.raises(CycleError) as excinfo:
        expand_job(project, "ci")
    assert excinfo.value.cycle == ["a", "a"]


def test_indirect_cycle_detected():
    project = _proj(
        {"ci": [("group", "a")]},
        {"a": ["x", ("group", "b")], "b": [("group", "c")], "c": [("group", "a")]},
    )
    with pytest.raises(CycleError) as excinfo:
        expand_job(project, "ci")
    assert excinfo.value.cycle == ["a", "b", "c", "a"]


def test_unknown_job_raises_key_error():
    project = _proj({"ci": ["a"]})
    with pytest.raises(KeyError):
        expand_job(project, "nope")


def test_unknown_group_raises_key_error():
    project = _proj({"ci": [("group", "missing")]})
    with pytest.raises(KeyError):
        expand_job(project, "ci")
