"""Callback protocol for AutoFlow lifecycle hooks.

The engine calls every registered callback as ``cb(event, data)`` at key
points of a run.  Callbacks may be async or plain callables; an error raised
by a callback is logged and never changes the outcome of the run.

Usage:
    async def on_event(event: str, data: dict) -> None:
        if event == "step_failed":
            alert(data["step_id"], data["error"])

    engine = WorkflowEngine(store, registry, callbacks=[on_event])
"""

from typing import Any, Protocol, runtime_checkable

EVENTS = (
    "execution_started",
    "step_started",
    "step_completed",
    "step_failed",
    "execution_completed",
    "execution_failed",
)


@runtime_checkable
class AutoflowCallback(Protocol):
    async def __call__(self, event: str, data: dict[str, Any]) -> None:
        ...
