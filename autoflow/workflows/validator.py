"""
WorkflowValidator — structural correctness checker for workflow definitions.

Checks are non-destructive reads of the definition.  It accepts either a
``Workflow`` model or the raw mapping a caller received (e.g. a JSON request
body), since a raw mapping is where most structural defects show up.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import BaseModel

from autoflow.types import ValidationResult, Workflow


class WorkflowValidator:
    """
    Validates the structural integrity of a workflow definition.

    Usage::

        result = WorkflowValidator().validate(workflow)
        if not result.valid:
            raise WorkflowValidationError("Invalid workflow", violations=result.errors)

    All checks are run even if earlier ones fail, so callers get the full
    error list in one shot.
    """

    def validate(self, workflow: Union[Workflow, Mapping[str, Any]]) -> ValidationResult:
        """
        Run all structural checks on a workflow definition.

        Returns:
            ValidationResult; ``valid`` is True iff ``errors`` is empty.
        """
        data = _as_mapping(workflow)
        errors: list[str] = []

        if not data.get("id"):
            errors.append("Workflow must have an id")
        if not data.get("name"):
            errors.append("Workflow must have a name")

        actions = data.get("actions")
        if not isinstance(actions, list):
            errors.append("Workflow must have an actions array")
            actions = []

        for i, action in enumerate(actions):
            action = _as_mapping(action)
            if not action.get("id"):
                errors.append(f"Action {i} must have an id")
            if not action.get("type"):
                errors.append(f"Action {i} must have a type")
            if action.get("config") is None:
                errors.append(f"Action {i} must have config")

        return ValidationResult(valid=not errors, errors=errors)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, Mapping):
        return value
    return {}


def validate_workflow(workflow: Union[Workflow, Mapping[str, Any]]) -> ValidationResult:
    """Module-level shortcut for ``WorkflowValidator().validate``."""
    return WorkflowValidator().validate(workflow)
