"""All shared types, enums, and type aliases. Everything imports from here."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_serializer


# ── Enums ──────────────────────────────────────────────────────────────

class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

class StepStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# ── Workflow definitions ───────────────────────────────────────────────

class Action(BaseModel):
    """One configured step of a workflow."""
    id: str = ""
    type: str = ""                          # handler tag looked up in the ActionRegistry
    config: JsonValue = None                # raw config, may contain {{...}} templates
    output: Optional[str] = None            # context key the result is stored under

class Workflow(BaseModel):
    """Declarative workflow: an ordered list of actions."""
    id: str = ""
    name: str = ""
    description: str = ""
    actions: list[Action] = Field(default_factory=list)
    is_active: bool = True

class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


# ── Execution records ──────────────────────────────────────────────────

class StepLogEntry(BaseModel):
    """One entry of a run's aggregate log, appended per attempted action."""
    step: str
    status: StepStatus
    output: Any = None
    error: Optional[str] = None

    @model_serializer
    def to_dict(self) -> dict[str, Any]:
        """Log shape persisted with the execution: output on success, error on failure."""
        if self.status == StepStatus.FAILED:
            return {"step": self.step, "status": self.status.value, "error": self.error}
        return {"step": self.step, "status": self.status.value, "output": self.output}

class ExecutionResult(BaseModel):
    """Value returned by WorkflowEngine.execute. ``context`` is only set on success."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    execution_id: str = Field(alias="executionId")
    log: list[StepLogEntry] = Field(default_factory=list)
    context: Optional[dict[str, Any]] = None
    error: Optional[str] = None

class ExecutionRecord(BaseModel):
    """Persisted run of one workflow against one trigger input."""
    id: str
    workflow_id: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    trigger_data: Any = Field(default_factory=dict)
    execution_log: Optional[list[dict[str, Any]]] = None
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

class StepRecord(BaseModel):
    """Persisted attempt of one action within an execution."""
    id: int
    execution_id: str
    step_id: str
    step_type: str
    status: StepStatus = StepStatus.RUNNING
    input_data: Any = None                  # pre-substitution config
    output_data: Any = None
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

class ActionDefinition(BaseModel):
    """Registration record for an action handler."""
    name: str
    description: str = ""

class ExecutionStats(BaseModel):
    active_workflows: int = 0
    total_executions: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
