"""Application services."""

from .workflows import WorkflowService, get_workflow_service, reset_workflow_state

__all__ = [
    "WorkflowService",
    "get_workflow_service",
    "reset_workflow_state",
]
