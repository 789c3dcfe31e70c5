"""HTTP request action built on httpx."""

import json
from typing import Any

import httpx

from autoflow.actions.plugin import action
from autoflow.config import config as app_config
from autoflow.exceptions import ActionError

_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}


def _parse_response_body(content: bytes, encoding: str = "utf-8") -> Any:
    """JSON when the body parses as JSON, text otherwise."""
    if not content:
        return None
    try:
        return json.loads(content)
    except (json.JSONDecodeError, ValueError):
        return content.decode(encoding, errors="replace")


async def _execute_single(method: str, url: str, request_kwargs: dict, timeout: float) -> tuple:
    """Send one request and return (response, content)."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.request(method, url, **request_kwargs)
        return response, response.content


@action(name="http_request", description="Make an HTTP request")
async def http_request(config: Any) -> dict:
    """Make an HTTP request and return its status, headers and parsed body.

    Config keys: ``url`` (required), ``method`` (GET), ``headers``,
    ``query_params``, ``body`` (sent as JSON, or raw when a string),
    ``timeout_seconds`` and ``raise_for_status`` (True).
    """
    if not isinstance(config, dict):
        raise ActionError("http_request config must be an object", action_type="http_request")
    url = config.get("url")
    if not url:
        raise ActionError("url is required", action_type="http_request")
    method = str(config.get("method", "GET")).upper()
    if method not in _METHODS:
        raise ActionError(f"Unsupported HTTP method: {method}", action_type="http_request")

    request_kwargs: dict = {"headers": dict(config.get("headers") or {})}
    if config.get("query_params"):
        request_kwargs["params"] = dict(config["query_params"])
    body = config.get("body")
    if body is not None:
        if isinstance(body, str):
            request_kwargs["content"] = body.encode()
        else:
            request_kwargs["json"] = body

    timeout = config.get("timeout_seconds", app_config.http_timeout_seconds)
    try:
        response, content = await _execute_single(method, url, request_kwargs, timeout)
    except httpx.HTTPError as exc:
        raise ActionError(f"Request to {url} failed: {exc}", action_type="http_request")

    parsed = _parse_response_body(content)
    if response.status_code >= 400 and config.get("raise_for_status", True):
        raise ActionError(
            f"HTTP {response.status_code} from {method} {url}",
            action_type="http_request",
            details={"body": parsed},
        )
    return {
        "status_code": response.status_code,
        "headers": dict(response.headers),
        "body": parsed,
    }
