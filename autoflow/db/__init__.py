"""autoflow.db — persistence for workflows, executions and steps."""

from .memory import InMemoryExecutionStore
from .store import ExecutionStore, SqlExecutionStore

__all__ = ["ExecutionStore", "InMemoryExecutionStore", "SqlExecutionStore"]
