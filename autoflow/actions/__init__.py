"""autoflow.actions — action handler registry and built-in actions."""

from .plugin import action, register_builtins
from .registry import ActionHandler, ActionRegistry, invoke_handler

__all__ = ["ActionHandler", "ActionRegistry", "action", "invoke_handler", "register_builtins"]
