"""Central registry of all available action handlers."""

import inspect
from typing import Any, Callable, Optional, Protocol, Union, runtime_checkable

from autoflow.exceptions import UnknownActionType
from autoflow.types import ActionDefinition


@runtime_checkable
class ActionHandler(Protocol):
    """Single-method handler interface: does the work for one action type."""

    def execute(self, config: Any) -> Any:
        """Run the action with its resolved config. May be sync or async."""
        ...


Handler = Union[ActionHandler, Callable[[Any], Any]]


async def invoke_handler(handler: Handler, config: Any) -> Any:
    """Call a handler object or plain callable, awaiting the result if needed."""
    fn = handler.execute if isinstance(handler, ActionHandler) else handler
    result = fn(config)
    if inspect.isawaitable(result):
        result = await result
    return result


class ActionRegistry:
    """Maps action type tags to handlers."""

    def __init__(self):
        self._definitions: dict[str, ActionDefinition] = {}
        self._handlers: dict[str, Handler] = {}

    def register(self, action_type: str, handler: Handler, description: str = "") -> None:
        """Register a handler under ``action_type``, replacing any previous one.

        Args:
            action_type: Type tag used by workflow actions
            handler: Object with ``execute(config)`` or a callable taking the config
            description: Human-readable summary
        """
        if not description:
            doc = inspect.getdoc(handler) or ""
            description = doc.split("\n")[0]
        self._definitions[action_type] = ActionDefinition(name=action_type, description=description)
        self._handlers[action_type] = handler

    def unregister(self, action_type: str) -> None:
        self._definitions.pop(action_type, None)
        self._handlers.pop(action_type, None)

    def lookup(self, action_type: str) -> Optional[Handler]:
        """Return the handler for ``action_type`` or None when none is registered."""
        return self._handlers.get(action_type)

    def get(self, action_type: str) -> Handler:
        """Get a handler.

        Raises:
            UnknownActionType: if no handler is registered
        """
        handler = self.lookup(action_type)
        if handler is None:
            raise UnknownActionType(f"Unknown action type: {action_type}", action_type=action_type)
        return handler

    def list_actions(self) -> list[ActionDefinition]:
        """List all registered action definitions."""
        return list(self._definitions.values())

    def __contains__(self, action_type: str) -> bool:
        return action_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
