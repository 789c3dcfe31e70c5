"""Built-in transform action — JMESPath extraction over JSON data."""

from typing import Any

import jmespath
from jmespath.exceptions import JMESPathError

from autoflow.actions.plugin import action
from autoflow.exceptions import ActionError


@action(name="transform", description="Reshape data with a JMESPath expression")
async def transform(config: Any) -> Any:
    """Evaluate ``config["expression"]`` against ``config["data"]``.

    Without an expression the data is returned unchanged, which makes the
    action usable for pinning a resolved value into the context.
    """
    if not isinstance(config, dict):
        raise ActionError("transform config must be an object", action_type="transform")
    data = config.get("data")
    expression = config.get("expression")
    if not expression:
        return data
    try:
        return jmespath.search(expression, data)
    except JMESPathError as exc:
        raise ActionError(f"Invalid JMESPath expression {expression!r}: {exc}", action_type="transform")
