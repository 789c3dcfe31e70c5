"""Callback/hook system for AutoFlow lifecycle events."""

from autoflow.callbacks.base import EVENTS, AutoflowCallback
from autoflow.callbacks.logging import LoggingCallback

__all__ = ["EVENTS", "AutoflowCallback", "LoggingCallback"]
