from .expand import expand_job
from .types import CycleError, GraphError

__all__ = ["expand_job", "GraphError", "CycleError"]
