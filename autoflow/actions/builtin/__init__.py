"""Built-in actions package. Import to register all built-in actions."""

from autoflow.actions.builtin.basic import delay, log_message
from autoflow.actions.builtin.http_request import http_request
from autoflow.actions.builtin.transform import transform

__all__ = ["delay", "log_message", "http_request", "transform"]
