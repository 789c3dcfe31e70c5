"""``{{path.to.value}}`` template resolution for action configs.

Pure functions: nothing here touches the store, the registry or the caller's
data. Every container in the input is rebuilt, never mutated.

Examples::

    resolve("Hello {{trigger.name}}", {"trigger": {"name": "John"}})
    → "Hello John"
    resolve({"tags": ["{{missing.key}}"]}, {})
    → {"tags": ["{{missing.key}}"]}
"""

import json
import re
from typing import Any

# Compiled once for template resolution
TEMPLATE_RE = re.compile(r"\{\{([^}]+)\}\}")

# Distinguishes "absent" from a present-but-falsy value (False, 0, "", None)
_MISSING = object()


def lookup_path(path: str, context: Any) -> Any:
    """Navigate a dot-separated path through the context.

    Mappings are indexed by key and lists by integer position.  Returns
    ``_MISSING`` for any missing segment or when a segment hits a scalar.

    Examples::

        lookup_path("trigger.user_id", context)
        lookup_path("fetch.body.items.0.name", context)
    """
    val = context
    for part in path.split("."):
        if isinstance(val, dict):
            if part not in val:
                return _MISSING
            val = val[part]
        elif isinstance(val, list):
            try:
                index = int(part)
            except ValueError:
                return _MISSING
            if index < 0 or index >= len(val):
                return _MISSING
            val = val[index]
        else:
            return _MISSING
    return val


def to_text(value: Any) -> str:
    """String form used when a value is spliced into a template string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def substitute(text: str, context: dict) -> str:
    """Replace every resolvable ``{{path}}`` in ``text``; leave the rest verbatim."""
    def _sub(m: re.Match) -> str:
        value = lookup_path(m.group(1).strip(), context)
        if value is _MISSING:
            return m.group(0)
        return to_text(value)

    return TEMPLATE_RE.sub(_sub, text)


def resolve(value: Any, context: dict) -> Any:
    """Recursively resolve ``{{...}}`` templates in ``value``.

    Strings are substituted, lists element-wise, dicts value-wise (keys are
    never substituted).  Scalar non-string values are returned unchanged.
    """
    if isinstance(value, str):
        return substitute(value, context)
    if isinstance(value, list):
        return [resolve(item, context) for item in value]
    if isinstance(value, dict):
        return {k: resolve(v, context) for k, v in value.items()}
    return value
