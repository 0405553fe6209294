from .loader import build_project_config, load_project
from .types import (
    ConfigError,
    GroupRef,
    JobConfig,
    ProjectConfig,
    TaskConfig,
    UnsupportedConfigFormatError,
)

__all__ = [
    "load_project",
    "build_project_config",
    "ProjectConfig",
    "JobConfig",
    "TaskConfig",
    "GroupRef",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
