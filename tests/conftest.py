"""Test fixtures: action registry, in-memory store, engine, sample workflows.

All tests should use these fixtures for consistency.
"""

import pytest

from autoflow.actions.registry import ActionRegistry
from autoflow.config import AutoflowConfig
from autoflow.core.engine import WorkflowEngine
from autoflow.db.memory import InMemoryExecutionStore
from autoflow.types import Action, Workflow


@pytest.fixture
def config():
    """Test configuration with safe defaults."""
    return AutoflowConfig(
        debug=True,
        database_url="sqlite+aiosqlite:///:memory:",
        max_workflow_actions=10,
    )


@pytest.fixture
def registry():
    """Registry with small deterministic handlers.

    - echo:    returns its resolved config
    - upper:   upper-cases config["text"]
    - boom:    always raises RuntimeError("boom failed")
    """
    reg = ActionRegistry()

    async def echo(config):
        return config

    def upper(config):
        return {"text": config["text"].upper()}

    async def boom(config):
        raise RuntimeError("boom failed")

    reg.register("echo", echo, description="Echo the config")
    reg.register("upper", upper)
    reg.register("boom", boom)
    return reg


@pytest.fixture
def store():
    return InMemoryExecutionStore()


@pytest.fixture
def engine(store, registry):
    return WorkflowEngine(store, registry)


@pytest.fixture
def greeting_workflow():
    """Two actions: the second reads the first one's output."""
    return Workflow(
        id="wf-greet",
        name="Greeting",
        actions=[
            Action(
                id="greet",
                type="echo",
                config={"message": "Hello {{trigger.name}}"},
                output="greeting",
            ),
            Action(
                id="shout",
                type="upper",
                config={"text": "{{greeting.message}}!"},
                output="shouted",
            ),
        ],
    )


@pytest.fixture
def failing_workflow():
    """Three actions where the second one fails."""
    return Workflow(
        id="wf-fail",
        name="Fails in the middle",
        actions=[
            Action(id="first", type="echo", config={"n": 1}, output="first"),
            Action(id="second", type="boom", config={}),
            Action(id="third", type="echo", config={"n": 3}, output="third"),
        ],
    )
