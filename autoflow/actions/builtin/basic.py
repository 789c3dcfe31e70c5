"""Small utility actions: log and delay."""

import asyncio
import logging
from typing import Any

from autoflow.actions.plugin import action
from autoflow.exceptions import ActionError

logger = logging.getLogger(__name__)

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


@action(name="log", description="Write a message to the workflow log")
async def log_message(config: Any) -> dict:
    """Log ``config["message"]`` (or the whole config) and echo it back."""
    if isinstance(config, dict):
        message = config.get("message", "")
        level = str(config.get("level", "info")).lower()
    else:
        message, level = config, "info"
    if level not in _LEVELS:
        raise ActionError(f"Unsupported log level: {level}", action_type="log")
    logger.log(_LEVELS[level], f"[Workflow] {message}")
    return {"message": message, "level": level}


@action(name="delay", description="Pause the workflow for a number of seconds")
async def delay(config: Any) -> dict:
    seconds = config.get("seconds", 1) if isinstance(config, dict) else config
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        raise ActionError(f"Invalid delay seconds: {seconds!r}", action_type="delay")
    if seconds < 0:
        raise ActionError("Delay seconds must be non-negative", action_type="delay")
    await asyncio.sleep(seconds)
    return {"waited": seconds}
