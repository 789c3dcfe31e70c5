"""Workflow execution engine. Runs a workflow's actions in order.

Orchestrates per run: create execution → [create step → resolve config →
dispatch → record step → merge output] per action → finalize execution.

Fail-fast: the first failing action ends the run.  There is no branching,
parallelism, retry or cancellation.
"""

import inspect
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from autoflow.actions.registry import ActionRegistry, invoke_handler
from autoflow.core.resolver import resolve
from autoflow.db.store import ExecutionStore
from autoflow.exceptions import UnknownActionType
from autoflow.types import (
    ExecutionResult, ExecutionStatus, StepLogEntry, StepStatus, Workflow,
)

logger = logging.getLogger(__name__)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class WorkflowEngine:
    """Single entry point for running workflows.

    Constructor dependencies (all injected):
        - store: ExecutionStore the run and step records are written to
        - registry: ActionRegistry used to dispatch actions by type
        - callbacks: lifecycle callables ``cb(event, data)``

    The engine keeps no per-run state on ``self``; concurrent ``execute``
    calls share only the store.
    """

    def __init__(
        self,
        store: ExecutionStore,
        registry: ActionRegistry,
        callbacks: list[Callable] = None,
    ):
        self.store = store
        self.registry = registry
        self.callbacks = callbacks or []

    async def execute(self, workflow: Workflow, trigger_data: Any = None) -> ExecutionResult:
        """Execute every action of ``workflow`` in order.

        Callers are expected to validate the workflow first.  Action failures
        (unknown type included) are captured in the returned result; only
        store errors propagate.

        Args:
            workflow:     Workflow to run.
            trigger_data: Payload from the trigger, available as
                          ``{{trigger.<key>}}`` in action configs.

        Returns:
            ExecutionResult with the step log, plus the final context on
            success or the error message on failure.
        """
        trigger_data = {} if trigger_data is None else trigger_data
        execution_id = str(uuid.uuid4())
        actions = workflow.actions

        logger.info(
            f"[Engine] Starting execution {execution_id} "
            f"workflow={workflow.name!r} actions={len(actions)}"
        )

        await self.store.create_execution(
            execution_id, workflow.id, ExecutionStatus.RUNNING, trigger_data
        )
        await self._fire_callbacks("execution_started", {
            "execution_id": execution_id,
            "workflow_id": workflow.id,
            "action_count": len(actions),
        })

        # Owned by this run only; seeded keys may be shadowed by action outputs
        context: dict[str, Any] = {
            "trigger": trigger_data,
            "workflow": {"id": workflow.id, "name": workflow.name},
            "now": _iso_now(),
            "executionId": execution_id,
        }
        log: list[StepLogEntry] = []
        error: Optional[str] = None

        for index, action in enumerate(actions):
            logger.info(
                f"[Engine] Step {index + 1}/{len(actions)} id={action.id} type={action.type}"
            )
            step_handle = await self.store.create_step(
                execution_id, action.id, action.type, StepStatus.RUNNING, action.config
            )
            await self._fire_callbacks("step_started", {
                "execution_id": execution_id,
                "step_id": action.id,
                "step_type": action.type,
                "step_index": index,
            })

            try:
                resolved_config = resolve(action.config, context)
                result = await self._dispatch(action.type, resolved_config)
            except Exception as exc:
                error = _error_message(exc)
                logger.error(f"[Engine] Step '{action.id}' failed: {error}")
                await self.store.update_step(step_handle, StepStatus.FAILED, error_message=error)
                log.append(StepLogEntry(step=action.id, status=StepStatus.FAILED, error=error))
                await self._fire_callbacks("step_failed", {
                    "execution_id": execution_id,
                    "step_id": action.id,
                    "step_index": index,
                    "error": error,
                })
                break

            await self.store.update_step(step_handle, StepStatus.COMPLETED, output_data=result)
            if action.output:
                context[action.output] = result
            log.append(StepLogEntry(step=action.id, status=StepStatus.COMPLETED, output=result))
            await self._fire_callbacks("step_completed", {
                "execution_id": execution_id,
                "step_id": action.id,
                "step_index": index,
            })

        completed_at = datetime.now(timezone.utc)
        execution_log = [entry.to_dict() for entry in log]

        if error is not None:
            await self.store.update_execution(
                execution_id, ExecutionStatus.FAILED, execution_log, completed_at,
                error_message=error,
            )
            logger.warning(f"[Engine] Execution failed: {execution_id} error={error}")
            await self._fire_callbacks("execution_failed", {
                "execution_id": execution_id,
                "workflow_id": workflow.id,
                "error": error,
            })
            return ExecutionResult(
                success=False, execution_id=execution_id, error=error, log=log
            )

        await self.store.update_execution(
            execution_id, ExecutionStatus.COMPLETED, execution_log, completed_at
        )
        logger.info(f"[Engine] Execution completed: {execution_id}")
        await self._fire_callbacks("execution_completed", {
            "execution_id": execution_id,
            "workflow_id": workflow.id,
            "step_count": len(log),
        })
        return ExecutionResult(
            success=True, execution_id=execution_id, log=log, context=context
        )

    async def _dispatch(self, action_type: str, config: Any) -> Any:
        """Look up the handler for ``action_type`` and run it with ``config``.

        Raises:
            UnknownActionType: if no handler is registered for the type.
        """
        handler = self.registry.lookup(action_type)
        if handler is None:
            raise UnknownActionType(f"Unknown action type: {action_type}", action_type=action_type)
        return await invoke_handler(handler, config)

    async def _fire_callbacks(self, event: str, data: dict) -> None:
        """Notify callbacks. Callback errors are logged, never raised."""
        for cb in self.callbacks:
            try:
                outcome = cb(event, data)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as cb_exc:
                logger.warning(f"[Engine] Callback error on '{event}': {cb_exc}")
