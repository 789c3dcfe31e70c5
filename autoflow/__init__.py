"""AutoFlow — sequential workflow execution engine.

Usage:
    from autoflow import (
        ActionRegistry, InMemoryExecutionStore, WorkflowEngine, register_builtins,
    )

    registry = register_builtins(ActionRegistry())
    engine = WorkflowEngine(InMemoryExecutionStore(), registry)
    result = await engine.execute(workflow, {"name": "Ana"})
"""

from autoflow.types import (
    Action, Workflow, ValidationResult, StepLogEntry, ExecutionResult,
    ExecutionRecord, StepRecord, ExecutionStatus, StepStatus,
)
from autoflow.exceptions import (
    AutoflowError, WorkflowError, WorkflowNotFound, WorkflowAlreadyExists, WorkflowValidationError,
    ExecutionNotFound, ActionError, UnknownActionType,
)
from autoflow.actions import ActionRegistry, action, register_builtins
from autoflow.core import WorkflowEngine, resolve
from autoflow.db import ExecutionStore, InMemoryExecutionStore, SqlExecutionStore
from autoflow.workflows import WorkflowManager, WorkflowValidator, validate_workflow
from autoflow.version import __version__

__all__ = [
    "Action", "Workflow", "ValidationResult", "StepLogEntry", "ExecutionResult",
    "ExecutionRecord", "StepRecord", "ExecutionStatus", "StepStatus",
    "AutoflowError", "WorkflowError", "WorkflowNotFound", "WorkflowAlreadyExists", "WorkflowValidationError",
    "ExecutionNotFound", "ActionError", "UnknownActionType",
    "ActionRegistry", "action", "register_builtins",
    "WorkflowEngine", "resolve",
    "ExecutionStore", "InMemoryExecutionStore", "SqlExecutionStore",
    "WorkflowManager", "WorkflowValidator", "validate_workflow",
    "__version__",
]
