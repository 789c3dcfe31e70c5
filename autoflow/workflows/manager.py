"""
WorkflowManager — lifecycle management for Workflow definitions.

Supports both in-memory operation (no repository, for tests and embedding)
and persistence when a Repository is provided.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import uuid4

from autoflow.config import AutoflowConfig
from autoflow.exceptions import WorkflowAlreadyExists, WorkflowNotFound, WorkflowValidationError
from autoflow.types import Action, Workflow

from .validator import WorkflowValidator


class WorkflowManager:
    """
    Create, read, update and delete workflow definitions.

    Every write is validated first, so stored workflows are always
    structurally valid and can be handed straight to WorkflowEngine.execute.

    Args:
        repository:  Optional Repository instance for persistence.
                     When None, all state is kept in-memory.
        validator:   WorkflowValidator instance.  A default instance is created
                     if not supplied.
        config:      AutoflowConfig instance.  A default instance is created if
                     not supplied.
    """

    def __init__(
        self,
        repository: Any = None,
        validator: Optional[WorkflowValidator] = None,
        config: Optional[AutoflowConfig] = None,
    ) -> None:
        self._repository = repository
        self._validator = validator or WorkflowValidator()
        self._config = config or AutoflowConfig()

        # in-memory cache (always populated, even when repository is present)
        self._store: dict[str, Workflow] = {}

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _validate_or_raise(self, workflow: Workflow) -> None:
        errors = list(self._validator.validate(workflow).errors)
        limit = self._config.max_workflow_actions
        if len(workflow.actions) > limit:
            errors.append(
                f"Workflow has {len(workflow.actions)} actions; maximum allowed is {limit}"
            )
        if errors:
            raise WorkflowValidationError("Workflow validation failed", violations=errors)

    async def _exists(self, workflow_id: str) -> bool:
        if workflow_id in self._store:
            return True
        if self._repository is not None:
            return await self._repository.get_workflow(workflow_id) is not None
        return False

    # ── CRUD ──────────────────────────────────────────────────────────────────

    async def create(self, workflow: Workflow) -> Workflow:
        """
        Validate and store a new workflow.  A missing id is generated.

        Raises:
            WorkflowValidationError: if the definition is structurally invalid.
            WorkflowAlreadyExists: if a workflow with the same id is stored.
        """
        if not workflow.id:
            workflow = workflow.model_copy(update={"id": str(uuid4())})
        self._validate_or_raise(workflow)
        if await self._exists(workflow.id):
            raise WorkflowAlreadyExists(
                f"Workflow '{workflow.id}' already exists.", workflow_id=workflow.id
            )
        if self._repository is not None:
            await self._repository.create_workflow(workflow)
        # cache only after the repository accepted the row
        self._store[workflow.id] = workflow
        return workflow

    async def get(self, workflow_id: str) -> Workflow:
        """
        Load a workflow by ID.

        Raises:
            WorkflowNotFound: if not found.
        """
        workflow = self._store.get(workflow_id)
        if workflow is None and self._repository is not None:
            workflow = await self._repository.get_workflow(workflow_id)
            if workflow is not None:
                self._store[workflow.id] = workflow
        if workflow is None:
            raise WorkflowNotFound(
                f"Workflow '{workflow_id}' not found.", workflow_id=workflow_id
            )
        return workflow

    async def list(self, is_active: Optional[bool] = None) -> list[Workflow]:
        if self._repository is not None:
            workflows = await self._repository.list_workflows(is_active=is_active)
            self._store.update({w.id: w for w in workflows})
            return workflows
        return [
            w for w in self._store.values()
            if is_active is None or w.is_active == is_active
        ]

    async def update(
        self,
        workflow_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        actions: Optional[list[Action]] = None,
        is_active: Optional[bool] = None,
    ) -> Workflow:
        """
        Update a workflow and re-validate it.

        Raises:
            WorkflowNotFound: if the workflow does not exist.
            WorkflowValidationError: if the updated definition is invalid.
        """
        existing = await self.get(workflow_id)
        updates: dict[str, Any] = {}
        if name is not None:
            updates["name"] = name
        if description is not None:
            updates["description"] = description
        if actions is not None:
            updates["actions"] = actions
        if is_active is not None:
            updates["is_active"] = is_active

        updated = existing.model_copy(update=updates)
        self._validate_or_raise(updated)
        if self._repository is not None:
            await self._repository.update_workflow(updated)
        self._store[workflow_id] = updated
        return updated

    async def delete(self, workflow_id: str) -> None:
        """
        Remove a workflow.

        Raises:
            WorkflowNotFound: if the workflow does not exist.
        """
        await self.get(workflow_id)
        if self._repository is not None:
            await self._repository.delete_workflow(workflow_id)
        self._store.pop(workflow_id, None)
