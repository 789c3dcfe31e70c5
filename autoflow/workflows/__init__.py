"""autoflow.workflows — Workflow validation and lifecycle management."""

from .manager import WorkflowManager
from .validator import WorkflowValidator, validate_workflow

__all__ = ["WorkflowManager", "WorkflowValidator", "validate_workflow"]
