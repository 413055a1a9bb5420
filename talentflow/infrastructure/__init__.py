"""Infrastructure layer exports."""

from .facts import FactRepository, InMemoryFactRepository
from .workflows import WorkflowCache

__all__ = [
    "FactRepository",
    "InMemoryFactRepository",
    "WorkflowCache",
]
