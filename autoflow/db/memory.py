"""Dict-backed ExecutionStore for tests and embedding without a database."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any, Optional

from autoflow.exceptions import ExecutionNotFound
from autoflow.types import ExecutionRecord, ExecutionStatus, StepRecord, StepStatus


class InMemoryExecutionStore:
    """Keeps executions and steps in memory. Step handles are increasing ints."""

    def __init__(self) -> None:
        self.executions: dict[str, ExecutionRecord] = {}
        self.steps: dict[int, StepRecord] = {}
        self._ids = itertools.count(1)

    async def create_execution(
        self, execution_id: str, workflow_id: str, status: ExecutionStatus, trigger_data: Any,
    ) -> ExecutionRecord:
        record = ExecutionRecord(
            id=execution_id,
            workflow_id=workflow_id,
            status=status,
            trigger_data=trigger_data if trigger_data is not None else {},
            started_at=datetime.now(timezone.utc),
        )
        self.executions[execution_id] = record
        return record

    async def create_step(
        self, execution_id: str, step_id: str, step_type: str, status: StepStatus, input_data: Any,
    ) -> int:
        handle = next(self._ids)
        self.steps[handle] = StepRecord(
            id=handle,
            execution_id=execution_id,
            step_id=step_id,
            step_type=step_type,
            status=status,
            input_data=input_data,
            started_at=datetime.now(timezone.utc),
        )
        return handle

    async def update_step(
        self, step_handle: int, status: StepStatus, output_data: Any = None,
        error_message: Optional[str] = None,
    ) -> StepRecord:
        existing = self.steps.get(step_handle)
        if existing is None:
            raise ExecutionNotFound(
                f"Step record {step_handle} not found.", details={"step_handle": step_handle}
            )
        record = existing.model_copy(update={
            "status": status,
            "output_data": output_data,
            "error_message": error_message,
            "completed_at": datetime.now(timezone.utc),
        })
        self.steps[step_handle] = record
        return record

    async def update_execution(
        self, execution_id: str, status: ExecutionStatus, execution_log: list[dict],
        completed_at: datetime, error_message: Optional[str] = None,
    ) -> ExecutionRecord:
        existing = self.executions.get(execution_id)
        if existing is None:
            raise ExecutionNotFound(
                f"Execution '{execution_id}' not found.", execution_id=execution_id
            )
        updates: dict[str, Any] = {
            "status": status,
            "execution_log": execution_log,
            "completed_at": completed_at,
        }
        if error_message is not None:
            updates["error_message"] = error_message
        record = existing.model_copy(update=updates)
        self.executions[execution_id] = record
        return record

    async def get_execution(self, execution_id: str) -> Optional[ExecutionRecord]:
        return self.executions.get(execution_id)

    async def get_execution_steps(self, execution_id: str) -> list[StepRecord]:
        return [
            s for _, s in sorted(self.steps.items()) if s.execution_id == execution_id
        ]

    async def list_executions(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[ExecutionStatus] = None,
        limit: int = 50,
    ) -> list[ExecutionRecord]:
        records = [
            r for r in self.executions.values()
            if (not workflow_id or r.workflow_id == workflow_id)
            and (not status or r.status == status)
        ]
        records.sort(key=lambda r: r.started_at, reverse=True)
        return records[:limit]
