"""Data access layer.

This is the ONLY layer that talks to the database. Methods return the
Pydantic types from ``autoflow.types``, never ORM rows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from autoflow.db.models import WorkflowModel, ExecutionModel, ExecutionStepModel
from autoflow.types import (
    ExecutionRecord, ExecutionStats, ExecutionStatus, StepRecord, StepStatus, Workflow,
)


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def _to_workflow(record: WorkflowModel) -> Workflow:
    workflow = Workflow.model_validate(record.definition)
    return workflow.model_copy(update={"is_active": bool(record.is_active)})


def _to_execution(record: ExecutionModel) -> ExecutionRecord:
    return ExecutionRecord(
        id=record.id,
        workflow_id=record.workflow_id,
        status=ExecutionStatus(record.status),
        trigger_data=record.trigger_data,
        execution_log=record.execution_log,
        error_message=record.error_message,
        started_at=record.started_at,
        completed_at=record.completed_at,
    )


def _to_step(record: ExecutionStepModel) -> StepRecord:
    return StepRecord(
        id=record.id,
        execution_id=record.execution_id,
        step_id=record.step_id,
        step_type=record.step_type,
        status=StepStatus(record.status),
        input_data=record.input_data,
        output_data=record.output_data,
        error_message=record.error_message,
        started_at=record.started_at,
        completed_at=record.completed_at,
    )


class Repository:
    """All database operations for workflows, executions and steps."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Workflows ──
    async def create_workflow(self, workflow: Workflow) -> Workflow:
        """Persist a workflow definition."""
        record = WorkflowModel(
            id=workflow.id,
            name=workflow.name,
            description=workflow.description,
            definition=workflow.model_dump(mode="json"),
            is_active=workflow.is_active,
        )
        self.session.add(record)
        await self.session.commit()
        return workflow

    async def get_workflow(self, workflow_id: str) -> Optional[Workflow]:
        result = await self.session.execute(
            select(WorkflowModel).where(WorkflowModel.id == workflow_id)
        )
        record = result.scalar_one_or_none()
        return _to_workflow(record) if record is not None else None

    async def list_workflows(self, is_active: Optional[bool] = None) -> list[Workflow]:
        """List workflows, newest first, optionally filtered by active flag."""
        query = select(WorkflowModel)
        if is_active is not None:
            query = query.where(WorkflowModel.is_active == is_active)
        result = await self.session.execute(query.order_by(WorkflowModel.created_at.desc()))
        return [_to_workflow(r) for r in result.scalars().all()]

    async def update_workflow(self, workflow: Workflow) -> Optional[Workflow]:
        """Replace a stored definition. Returns None when the workflow is unknown."""
        result = await self.session.execute(
            select(WorkflowModel).where(WorkflowModel.id == workflow.id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        record.name = workflow.name
        record.description = workflow.description
        record.definition = workflow.model_dump(mode="json")
        record.is_active = workflow.is_active
        record.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        return workflow

    async def delete_workflow(self, workflow_id: str) -> bool:
        result = await self.session.execute(
            delete(WorkflowModel).where(WorkflowModel.id == workflow_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    # ── Executions ──
    async def create_execution(
        self,
        execution_id: str,
        workflow_id: str,
        status: ExecutionStatus,
        trigger_data: Any,
    ) -> ExecutionRecord:
        """Insert the run record at run start."""
        record = ExecutionModel(
            id=execution_id,
            workflow_id=workflow_id,
            status=_status_value(status),
            trigger_data=trigger_data if trigger_data is not None else {},
        )
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return _to_execution(record)

    async def update_execution(
        self,
        execution_id: str,
        status: ExecutionStatus,
        execution_log: list[dict],
        completed_at: datetime,
        error_message: Optional[str] = None,
    ) -> Optional[ExecutionRecord]:
        """Move a run to its terminal status."""
        result = await self.session.execute(
            select(ExecutionModel).where(ExecutionModel.id == execution_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        record.status = _status_value(status)
        record.execution_log = execution_log
        record.completed_at = completed_at
        if error_message is not None:
            record.error_message = error_message
        await self.session.commit()
        await self.session.refresh(record)
        return _to_execution(record)

    async def get_execution(self, execution_id: str) -> Optional[ExecutionRecord]:
        result = await self.session.execute(
            select(ExecutionModel).where(ExecutionModel.id == execution_id)
        )
        record = result.scalar_one_or_none()
        return _to_execution(record) if record is not None else None

    async def list_executions(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[ExecutionStatus] = None,
        limit: int = 50,
    ) -> list[ExecutionRecord]:
        """Most recent executions first, optionally filtered."""
        query = select(ExecutionModel)
        if workflow_id:
            query = query.where(ExecutionModel.workflow_id == workflow_id)
        if status:
            query = query.where(ExecutionModel.status == _status_value(status))
        query = query.order_by(ExecutionModel.started_at.desc()).limit(limit)
        result = await self.session.execute(query)
        return [_to_execution(r) for r in result.scalars().all()]

    # ── Execution steps ──
    async def create_step(
        self,
        execution_id: str,
        step_id: str,
        step_type: str,
        status: StepStatus,
        input_data: Any,
    ) -> int:
        """Insert a step record; the autoincrement id is the step handle."""
        record = ExecutionStepModel(
            execution_id=execution_id,
            step_id=step_id,
            step_type=step_type,
            status=_status_value(status),
            input_data=input_data,
        )
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record.id

    async def update_step(
        self,
        step_handle: int,
        status: StepStatus,
        output_data: Any = None,
        error_message: Optional[str] = None,
    ) -> Optional[StepRecord]:
        result = await self.session.execute(
            select(ExecutionStepModel).where(ExecutionStepModel.id == step_handle)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        record.status = _status_value(status)
        record.output_data = output_data
        record.error_message = error_message
        record.completed_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(record)
        return _to_step(record)

    async def get_execution_steps(self, execution_id: str) -> list[StepRecord]:
        """All steps of a run in the order they were attempted."""
        result = await self.session.execute(
            select(ExecutionStepModel)
            .where(ExecutionStepModel.execution_id == execution_id)
            .order_by(ExecutionStepModel.id)
        )
        return [_to_step(r) for r in result.scalars().all()]

    # ── Stats ──
    async def get_stats(self) -> ExecutionStats:
        """Active workflow count plus execution counts by status."""
        active = await self.session.execute(
            select(func.count(WorkflowModel.id)).where(WorkflowModel.is_active.is_(True))
        )
        rows = await self.session.execute(
            select(ExecutionModel.status, func.count(ExecutionModel.id))
            .group_by(ExecutionModel.status)
        )
        by_status = {status: count for status, count in rows.all()}
        return ExecutionStats(
            active_workflows=active.scalar_one(),
            total_executions=sum(by_status.values()),
            by_status=by_status,
        )
