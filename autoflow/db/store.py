"""Execution store: the persistence seam the WorkflowEngine writes through.

The engine only needs four operations.  ``SqlExecutionStore`` backs them with
the Repository; ``InMemoryExecutionStore`` (see ``memory.py``) keeps them in
dicts for tests and embedding.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from autoflow.db.repository import Repository
from autoflow.exceptions import ExecutionNotFound
from autoflow.types import ExecutionRecord, ExecutionStatus, StepRecord, StepStatus


@runtime_checkable
class ExecutionStore(Protocol):
    """Operations the engine awaits; each must be durable when it returns."""

    async def create_execution(
        self, execution_id: str, workflow_id: str, status: ExecutionStatus, trigger_data: Any,
    ) -> Any:
        ...

    async def create_step(
        self, execution_id: str, step_id: str, step_type: str, status: StepStatus, input_data: Any,
    ) -> Any:
        """Returns an opaque step handle passed back to ``update_step``."""
        ...

    async def update_step(
        self, step_handle: Any, status: StepStatus, output_data: Any = None,
        error_message: Optional[str] = None,
    ) -> Any:
        ...

    async def update_execution(
        self, execution_id: str, status: ExecutionStatus, execution_log: list[dict],
        completed_at: datetime, error_message: Optional[str] = None,
    ) -> Any:
        ...


class SqlExecutionStore:
    """ExecutionStore over SQLAlchemy.

    Opens one session per operation, so concurrent runs never share a
    session; each run only writes rows keyed by its own execution id.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = None):
        if session_factory is None:
            from autoflow.db.database import async_session
            session_factory = async_session
        self._session_factory = session_factory

    async def create_execution(self, execution_id, workflow_id, status, trigger_data) -> ExecutionRecord:
        async with self._session_factory() as session:
            return await Repository(session).create_execution(
                execution_id, workflow_id, status, trigger_data
            )

    async def create_step(self, execution_id, step_id, step_type, status, input_data) -> int:
        async with self._session_factory() as session:
            return await Repository(session).create_step(
                execution_id, step_id, step_type, status, input_data
            )

    async def update_step(self, step_handle, status, output_data=None, error_message=None) -> StepRecord:
        async with self._session_factory() as session:
            record = await Repository(session).update_step(
                step_handle, status, output_data=output_data, error_message=error_message
            )
        if record is None:
            raise ExecutionNotFound(
                f"Step record {step_handle} not found.", details={"step_handle": step_handle}
            )
        return record

    async def update_execution(
        self, execution_id, status, execution_log, completed_at, error_message=None,
    ) -> ExecutionRecord:
        async with self._session_factory() as session:
            record = await Repository(session).update_execution(
                execution_id, status, execution_log, completed_at, error_message=error_message
            )
        if record is None:
            raise ExecutionNotFound(
                f"Execution '{execution_id}' not found.", execution_id=execution_id
            )
        return record

    async def get_execution(self, execution_id: str) -> Optional[ExecutionRecord]:
        async with self._session_factory() as session:
            return await Repository(session).get_execution(execution_id)

    async def get_execution_steps(self, execution_id: str) -> list[StepRecord]:
        async with self._session_factory() as session:
            return await Repository(session).get_execution_steps(execution_id)
