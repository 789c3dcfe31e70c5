"""@action decorator for registering functions as AutoFlow action handlers.

Usage:
    @action(name="send_slack", description="Post a message to Slack")
    async def send_slack(config: dict) -> dict:
        ...

Decorated handlers are collected at import time; ``register_builtins``
copies them into an ActionRegistry.
"""

from typing import Any, Callable

from autoflow.actions.registry import ActionRegistry

# Global collection of decorated handlers, filled at import time
_registered_actions: dict[str, tuple[str, Callable[..., Any]]] = {}


def action(name: str = None, description: str = None):
    """Decorator to register a function as an action handler.

    Args:
        name: Action type tag (defaults to function name)
        description: Action description (defaults to first docstring line)
    """
    def decorator(func):
        action_name = name or func.__name__
        action_desc = description or (func.__doc__ or "").strip().split("\n")[0]
        _registered_actions[action_name] = (action_desc, func)
        func._autoflow_action = action_name
        return func

    return decorator


def register_builtins(registry: ActionRegistry) -> ActionRegistry:
    """Register every decorated handler (built-ins included) on ``registry``."""
    import autoflow.actions.builtin  # noqa: F401

    for action_name, (action_desc, func) in _registered_actions.items():
        registry.register(action_name, func, description=action_desc)
    return registry
