"""autoflow.core — variable resolution and the execution engine."""

from .engine import WorkflowEngine
from .resolver import resolve

__all__ = ["WorkflowEngine", "resolve"]
