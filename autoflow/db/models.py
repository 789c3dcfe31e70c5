"""All ORM models. These map 1:1 to the Pydantic types but are SQLAlchemy models.

Tables: workflows, executions, execution_steps
Indexes on the common query patterns (executions by workflow and status,
steps by execution).
"""

from sqlalchemy import Column, String, Integer, DateTime, JSON, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class WorkflowModel(Base):
    __tablename__ = "workflows"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    definition = Column(JSON, nullable=False)       # full Workflow dump
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)


class ExecutionModel(Base):
    __tablename__ = "executions"
    id = Column(String, primary_key=True)
    # No FK to workflows: runs may be started for workflows that were never stored
    workflow_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, index=True)   # ExecutionStatus value
    trigger_data = Column(JSON, default=dict)
    execution_log = Column(JSON, nullable=True)
    started_at = Column(DateTime, default=_now)
    completed_at = Column(DateTime, nullable=True)
    error_message = Column(Text, nullable=True)


class ExecutionStepModel(Base):
    __tablename__ = "execution_steps"
    id = Column(Integer, primary_key=True, autoincrement=True)
    execution_id = Column(String, ForeignKey("executions.id"), nullable=False, index=True)
    step_id = Column(String, nullable=False)
    step_type = Column(String, nullable=False)
    status = Column(String, nullable=False)               # StepStatus value
    input_data = Column(JSON, nullable=True)
    output_data = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, default=_now)
    completed_at = Column(DateTime, nullable=True)

    __table_args__ = (Index("ix_execution_steps_execution_started", "execution_id", "started_at"),)
