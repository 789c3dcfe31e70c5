"""Typed exception hierarchy. Every error AutoFlow can raise."""


class AutoflowError(Exception):
    """Base exception for all AutoFlow errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


# ── Workflows ───────────────────────────────────────────────────────────────


class WorkflowError(AutoflowError):
    """Base exception for all workflow-related errors."""
    pass


class WorkflowNotFound(WorkflowError):
    """Requested workflow does not exist."""
    def __init__(self, message: str, workflow_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.workflow_id = workflow_id


class WorkflowAlreadyExists(WorkflowError):
    """A workflow with the requested id is already stored."""
    def __init__(self, message: str, workflow_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.workflow_id = workflow_id


class WorkflowValidationError(WorkflowError):
    """Workflow definition is structurally invalid (missing id, name, actions...)."""
    def __init__(self, message: str, violations: list = None, **kwargs):
        super().__init__(message, **kwargs)
        self.violations = violations or []


class ExecutionNotFound(AutoflowError):
    """Requested execution record does not exist."""
    def __init__(self, message: str, execution_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.execution_id = execution_id


# ── Actions ─────────────────────────────────────────────────────────────────


class ActionError(AutoflowError):
    """Action handler execution failed."""
    def __init__(self, message: str, action_type: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.action_type = action_type


class UnknownActionType(ActionError):
    """No handler is registered for an action's type tag."""
    pass
