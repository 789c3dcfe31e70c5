"""WorkflowManager: validated CRUD, in-memory and over the Repository."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from autoflow.core.engine import WorkflowEngine
from autoflow.db.models import Base
from autoflow.db.repository import Repository
from autoflow.exceptions import WorkflowAlreadyExists, WorkflowNotFound, WorkflowValidationError
from autoflow.types import Action, Workflow
from autoflow.workflows.manager import WorkflowManager


@pytest.fixture
def manager(config):
    return WorkflowManager(config=config)


async def test_create_generates_id(manager, greeting_workflow):
    created = await manager.create(greeting_workflow.model_copy(update={"id": ""}))
    assert created.id
    assert (await manager.get(created.id)).name == "Greeting"


async def test_create_rejects_invalid(manager):
    with pytest.raises(WorkflowValidationError) as exc_info:
        await manager.create(Workflow(id="wf", actions=[Action(id="a", config={})]))
    assert exc_info.value.violations == [
        "Workflow must have a name",
        "Action 0 must have a type",
    ]


async def test_create_rejects_too_many_actions(manager):
    actions = [Action(id=str(i), type="echo", config={}) for i in range(11)]
    with pytest.raises(WorkflowValidationError) as exc_info:
        await manager.create(Workflow(id="wf", name="Big", actions=actions))
    assert "maximum allowed is 10" in exc_info.value.violations[0]


async def test_get_missing(manager):
    with pytest.raises(WorkflowNotFound) as exc_info:
        await manager.get("ghost")
    assert exc_info.value.workflow_id == "ghost"


async def test_update_revalidates(manager, greeting_workflow):
    await manager.create(greeting_workflow)
    updated = await manager.update("wf-greet", name="Renamed", is_active=False)
    assert updated.name == "Renamed"
    assert updated.is_active is False
    assert [w.id for w in await manager.list(is_active=False)] == ["wf-greet"]

    with pytest.raises(WorkflowValidationError):
        await manager.update("wf-greet", actions=[Action(id="", type="echo", config={})])
    assert (await manager.get("wf-greet")).name == "Renamed"


async def test_delete(manager, greeting_workflow):
    await manager.create(greeting_workflow)
    await manager.delete("wf-greet")
    assert await manager.list() == []
    with pytest.raises(WorkflowNotFound):
        await manager.delete("wf-greet")


async def test_stored_workflow_runs(config, store, registry, greeting_workflow):
    db = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with db.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(db, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        manager = WorkflowManager(repository=Repository(session), config=config)
        await manager.create(greeting_workflow)

        # Fresh manager: must load from the repository, not the cache
        reloaded = await WorkflowManager(repository=Repository(session)).get("wf-greet")
        assert reloaded == greeting_workflow

    result = await WorkflowEngine(store, registry).execute(reloaded, {"name": "Kim"})
    assert result.success is True
    assert result.context["shouted"] == {"text": "HELLO KIM!"}
    await db.dispose()


async def test_create_rejects_duplicate_id(manager, greeting_workflow):
    await manager.create(greeting_workflow)
    with pytest.raises(WorkflowAlreadyExists) as exc_info:
        await manager.create(greeting_workflow.model_copy(update={"name": "Impostor"}))
    assert exc_info.value.workflow_id == "wf-greet"
    assert (await manager.get("wf-greet")).name == "Greeting"


async def test_duplicate_id_detected_in_repository(config, greeting_workflow):
    db = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with db.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(db, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        await WorkflowManager(repository=Repository(session), config=config).create(greeting_workflow)

        # Fresh manager with an empty cache
        manager = WorkflowManager(repository=Repository(session), config=config)
        with pytest.raises(WorkflowAlreadyExists):
            await manager.create(greeting_workflow.model_copy(update={"name": "Impostor"}))
        assert (await manager.get("wf-greet")).name == "Greeting"
        assert (await Repository(session).get_workflow("wf-greet")).name == "Greeting"
    await db.dispose()


async def test_cache_untouched_when_repository_write_fails(config, greeting_workflow):
    class FailingRepository:
        async def get_workflow(self, workflow_id):
            return None

        async def create_workflow(self, workflow):
            raise ConnectionError("database unavailable")

    manager = WorkflowManager(repository=FailingRepository(), config=config)
    with pytest.raises(ConnectionError):
        await manager.create(greeting_workflow)
    with pytest.raises(WorkflowNotFound):
        await manager.get("wf-greet")
