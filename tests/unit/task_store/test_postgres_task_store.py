from datetime import date
from pathlib import Path
import pytest

from src.common.exceptions import (
    ConcurrencyConflictException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from src.tasks.schemas import Task, TaskStatus
from src.tasks.store.postgres.store import PostgresTaskStore

PARTITION_KEY = "TasksPartition"


@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    db_path: Path = tmp_path / "test_postgres_tasks.db"
    return f"sqlite:///{db_path}"


@pytest.fixture
def task_store(test_database_url: str) -> PostgresTaskStore:
    return PostgresTaskStore(database_url=test_database_url)


@pytest.fixture
def new_task() -> Task:
    return Task(
        partition_key=PARTITION_KEY,
        id="task-id",
        name="Write report",
        status=TaskStatus.TODO,
        due_date=date(2025, 1, 10),
    )


@pytest.mark.asyncio
async def test_insert_task_assigns_version_token(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    result = await task_store.insert_task(new_task)

    assert result.version_token
    assert result.model_copy(update={"version_token": None}) == new_task


@pytest.mark.asyncio
async def test_get_task_returns_inserted_fields(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    inserted = await task_store.insert_task(new_task)

    result = await task_store.get_task(PARTITION_KEY, "task-id")

    assert result == inserted


@pytest.mark.asyncio
async def test_insert_task_already_exists(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    await task_store.insert_task(new_task)

    with pytest.raises(ResourceAlreadyExistsException) as exc:
        await task_store.insert_task(new_task)

    assert exc.value.resource_type == ResourceType.TASK
    assert exc.value.identifier == "task-id"


@pytest.mark.asyncio
async def test_get_task_not_found(task_store: PostgresTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException) as exc:
        await task_store.get_task(PARTITION_KEY, "missing")

    assert exc.value.identifier == f"{PARTITION_KEY}/missing"


@pytest.mark.asyncio
async def test_update_task_with_current_version(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    inserted = await task_store.insert_task(new_task)
    assert inserted.version_token is not None

    result = await task_store.update_task_if_version_matches(
        inserted.model_copy(update={"status": TaskStatus.DONE, "due_date": None}),
        inserted.version_token,
    )

    assert result.version_token != inserted.version_token
    stored = await task_store.get_task(PARTITION_KEY, "task-id")
    assert stored == result
    assert stored.status == TaskStatus.DONE
    assert stored.due_date is None


@pytest.mark.asyncio
async def test_update_task_with_stale_version(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    inserted = await task_store.insert_task(new_task)
    assert inserted.version_token is not None
    first_update = await task_store.update_task_if_version_matches(
        inserted.model_copy(update={"status": TaskStatus.IN_PROGRESS}),
        inserted.version_token,
    )

    with pytest.raises(ConcurrencyConflictException):
        await task_store.update_task_if_version_matches(
            inserted.model_copy(update={"name": "Overwritten"}),
            inserted.version_token,
        )

    stored = await task_store.get_task(PARTITION_KEY, "task-id")
    assert stored == first_update


@pytest.mark.asyncio
async def test_update_task_not_found(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    with pytest.raises(ResourceNotFoundException):
        await task_store.update_task_if_version_matches(new_task, "any-version")


@pytest.mark.asyncio
async def test_delete_task(task_store: PostgresTaskStore, new_task: Task) -> None:
    await task_store.insert_task(new_task)

    await task_store.delete_task(PARTITION_KEY, "task-id")

    with pytest.raises(ResourceNotFoundException):
        await task_store.get_task(PARTITION_KEY, "task-id")


@pytest.mark.asyncio
async def test_delete_task_not_found(task_store: PostgresTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException):
        await task_store.delete_task(PARTITION_KEY, "missing")


@pytest.mark.asyncio
async def test_delete_task_with_stale_version(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    inserted = await task_store.insert_task(new_task)

    with pytest.raises(ConcurrencyConflictException):
        await task_store.delete_task(
            PARTITION_KEY, "task-id", expected_version="stale-version"
        )

    assert await task_store.get_task(PARTITION_KEY, "task-id") == inserted


@pytest.mark.asyncio
async def test_delete_task_with_current_version(
    task_store: PostgresTaskStore, new_task: Task
) -> None:
    inserted = await task_store.insert_task(new_task)

    await task_store.delete_task(
        PARTITION_KEY, "task-id", expected_version=inserted.version_token
    )

    with pytest.raises(ResourceNotFoundException):
        await task_store.get_task(PARTITION_KEY, "task-id")
