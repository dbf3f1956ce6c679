"""Storage backend mapping a GitHub project onto relational tables."""

from .project_storage import ProjectStorage, Storage

__all__ = ["ProjectStorage", "Storage"]
