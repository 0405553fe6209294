from .registry import Job, JobRegistry, build_pipeline, build_task, registry_from_project

__all__ = ["Job", "JobRegistry", "build_pipeline", "build_task", "registry_from_project"]
