"""Action registry, @action decorator and built-in actions."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from autoflow.actions.builtin.basic import delay, log_message
from autoflow.actions.builtin.http_request import http_request
from autoflow.actions.builtin.transform import transform
from autoflow.actions.plugin import _registered_actions, action, register_builtins
from autoflow.actions.registry import ActionRegistry, invoke_handler
from autoflow.exceptions import ActionError, UnknownActionType


# ── Registry ────────────────────────────────────────────────────────────────

class TestRegistry:
    def test_lookup_returns_none_when_absent(self):
        assert ActionRegistry().lookup("missing") is None

    def test_get_raises_unknown_action_type(self):
        with pytest.raises(UnknownActionType) as exc_info:
            ActionRegistry().get("nonexistent")
        assert str(exc_info.value) == "Unknown action type: nonexistent"
        assert exc_info.value.action_type == "nonexistent"

    def test_register_and_list(self):
        registry = ActionRegistry()

        def noop(config):
            """Do nothing at all.

            Longer description.
            """

        registry.register("noop", noop)
        registry.register("other", noop, description="Explicit")

        assert "noop" in registry
        assert len(registry) == 2
        descriptions = {d.name: d.description for d in registry.list_actions()}
        assert descriptions == {"noop": "Do nothing at all.", "other": "Explicit"}

        registry.unregister("noop")
        assert registry.lookup("noop") is None

    async def test_invoke_sync_async_and_objects(self):
        class Handler:
            async def execute(self, config):
                return config + 1

        async def async_fn(config):
            return config * 2

        assert await invoke_handler(lambda c: c - 1, 10) == 9
        assert await invoke_handler(async_fn, 10) == 20
        assert await invoke_handler(Handler(), 10) == 11


def test_decorator_and_register_builtins():
    @action(name="custom_test_action", description="Custom")
    async def custom(config):
        return config

    try:
        registry = register_builtins(ActionRegistry())
        for name in ("log", "delay", "transform", "http_request", "custom_test_action"):
            assert name in registry
        assert custom._autoflow_action == "custom_test_action"
    finally:
        _registered_actions.pop("custom_test_action", None)


# ── Basic actions ───────────────────────────────────────────────────────────

async def test_log_action(caplog):
    with caplog.at_level("INFO", logger="autoflow.actions.builtin.basic"):
        result = await log_message({"message": "hello", "level": "warning"})
    assert result == {"message": "hello", "level": "warning"}
    assert "hello" in caplog.text


async def test_log_action_rejects_unknown_level():
    with pytest.raises(ActionError):
        await log_message({"message": "x", "level": "loud"})


async def test_delay_action():
    assert await delay({"seconds": 0}) == {"waited": 0.0}
    with pytest.raises(ActionError):
        await delay({"seconds": "soon"})
    with pytest.raises(ActionError):
        await delay({"seconds": -1})


# ── Transform ───────────────────────────────────────────────────────────────

async def test_transform_expression():
    data = {"users": [{"name": "ana", "age": 30}, {"name": "bo", "age": 20}]}
    assert await transform({"data": data, "expression": "users[?age > `25`].name"}) == ["ana"]


async def test_transform_without_expression_returns_data():
    assert await transform({"data": {"a": 1}}) == {"a": 1}


async def test_transform_invalid_expression():
    with pytest.raises(ActionError, match="Invalid JMESPath"):
        await transform({"data": {}, "expression": "users[?"})


# ── HTTP request ────────────────────────────────────────────────────────────

def _mock_response(status_code=200, body=None, headers=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = headers or {"content-type": "application/json"}
    content = json.dumps(body).encode() if body is not None else b""
    return resp, content


def _patch_execute_single(resp, content):
    calls = []

    async def _fake(method, url, request_kwargs, timeout):
        calls.append((method, url, request_kwargs, timeout))
        return resp, content

    return patch(
        "autoflow.actions.builtin.http_request._execute_single", side_effect=_fake
    ), calls


async def test_http_get_success():
    patcher, calls = _patch_execute_single(*_mock_response(200, {"key": "value"}))
    with patcher:
        result = await http_request({"url": "https://api.example.com/data"})

    assert result["status_code"] == 200
    assert result["body"] == {"key": "value"}
    method, url, request_kwargs, _ = calls[0]
    assert method == "GET"
    assert url == "https://api.example.com/data"
    assert "json" not in request_kwargs


async def test_http_post_sends_json_body_and_params():
    patcher, calls = _patch_execute_single(*_mock_response(201, {"id": 7}))
    with patcher:
        result = await http_request({
            "url": "https://api.example.com/items",
            "method": "post",
            "body": {"name": "x"},
            "query_params": {"dry": "1"},
            "timeout_seconds": 5,
        })

    assert result["body"] == {"id": 7}
    method, _, request_kwargs, timeout = calls[0]
    assert method == "POST"
    assert request_kwargs["json"] == {"name": "x"}
    assert request_kwargs["params"] == {"dry": "1"}
    assert timeout == 5


async def test_http_error_status_raises():
    patcher, _ = _patch_execute_single(*_mock_response(404, {"error": "nope"}))
    with patcher:
        with pytest.raises(ActionError, match="HTTP 404"):
            await http_request({"url": "https://api.example.com/missing"})


async def test_http_error_status_returned_when_not_raising():
    patcher, _ = _patch_execute_single(*_mock_response(500, {"error": "down"}))
    with patcher:
        result = await http_request({"url": "https://x.test", "raise_for_status": False})
    assert result["status_code"] == 500
    assert result["body"] == {"error": "down"}


async def test_http_text_body():
    resp, _ = _mock_response(200)
    patcher, _ = _patch_execute_single(resp, b"plain text")
    with patcher:
        result = await http_request({"url": "https://x.test"})
    assert result["body"] == "plain text"


async def test_http_transport_error_wrapped():
    async def _fail(*args, **kwargs):
        raise httpx.ConnectError("refused")

    with patch("autoflow.actions.builtin.http_request._execute_single", side_effect=_fail):
        with pytest.raises(ActionError, match="failed"):
            await http_request({"url": "https://x.test"})


async def test_http_requires_url_and_valid_method():
    with pytest.raises(ActionError, match="url is required"):
        await http_request({})
    with pytest.raises(ActionError, match="Unsupported HTTP method"):
        await http_request({"url": "https://x.test", "method": "BREW"})
