"""Structured JSON logging callback for AutoFlow lifecycle events."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("autoflow.audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _compact(value: Any) -> Any:
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return str(value)[:200]


class LoggingCallback:
    """Emits one JSON log line per lifecycle event.

    Each line carries ``event``, ``ts`` and the event data, with long values
    truncated to 200 characters.  Failures are logged at ERROR, everything
    else at INFO.  Logger name: autoflow.audit
    """

    async def __call__(self, event: str, data: dict[str, Any]) -> None:
        level = logging.ERROR if event in ("step_failed", "execution_failed") else logging.INFO
        logger.log(level, json.dumps({
            "event": event,
            "ts": _now(),
            **{k: _compact(v) for k, v in data.items()},
        }))
