import json
from pathlib import Path
import pytest
from pytest_mock import MockerFixture

from src.archive.processor import ArchiveProcessor
from src.archive.store.base import ArchiveStore
from src.archive.store.filesystem.store import FilesystemArchiveStore
from src.tasks.schemas import Task, TaskStatus


@pytest.fixture
def archive_store(tmp_path: Path) -> FilesystemArchiveStore:
    return FilesystemArchiveStore(base_path=str(tmp_path), container_name="tasks")


@pytest.fixture
def processor(archive_store: FilesystemArchiveStore) -> ArchiveProcessor:
    return ArchiveProcessor(archive_store)


@pytest.fixture
def snapshot_message() -> str:
    return json.dumps(
        {
            "partitionKey": "TasksPartition",
            "id": "task-id",
            "name": "Write report",
            "status": "ToDo",
            "dueDate": "2025-01-10",
            "versionToken": "v1",
        }
    )


@pytest.mark.asyncio
async def test_process_message_writes_snapshot(
    processor: ArchiveProcessor,
    archive_store: FilesystemArchiveStore,
    snapshot_message: str,
) -> None:
    result = await processor.process_message(snapshot_message)

    assert result is not None
    assert result.id == "task-id"
    blob = await archive_store.read_blob("task-id.json")
    assert blob is not None
    assert json.loads(blob) == json.loads(snapshot_message)


@pytest.mark.asyncio
async def test_duplicate_delivery_is_idempotent(
    processor: ArchiveProcessor,
    archive_store: FilesystemArchiveStore,
    snapshot_message: str,
) -> None:
    await processor.process_message(snapshot_message)
    blob_after_first = await archive_store.read_blob("task-id.json")

    await processor.process_message(snapshot_message)

    assert await archive_store.read_blob("task-id.json") == blob_after_first


@pytest.mark.asyncio
async def test_last_processed_snapshot_wins(
    processor: ArchiveProcessor,
    archive_store: FilesystemArchiveStore,
) -> None:
    older = Task(
        partition_key="TasksPartition",
        id="task-id",
        name="Write report",
        status=TaskStatus.TODO,
        version_token="v1",
    )
    newer = older.model_copy(update={"status": TaskStatus.DONE, "version_token": "v2"})

    # Delivered out of order: the older snapshot is processed last.
    await processor.process_message(newer.to_snapshot_json())
    await processor.process_message(older.to_snapshot_json())

    blob = await archive_store.read_blob("task-id.json")
    assert blob is not None
    assert Task.model_validate_json(blob).status == TaskStatus.TODO


@pytest.mark.parametrize(
    "message",
    [
        None,
        "",
        "   ",
        "not json",
        '{"id": "task-id"}',
        '{"partitionKey": "p", "id": "x", "name": "n", "status": "Blocked"}',
        '{"partitionKey": "p", "id": "x", "name": "", "status": "ToDo"}',
    ],
)
@pytest.mark.asyncio
async def test_invalid_messages_are_dropped(
    mocker: MockerFixture, message: str | None
) -> None:
    mock_archive_store = mocker.Mock(spec=ArchiveStore)
    processor = ArchiveProcessor(mock_archive_store)

    result = await processor.process_message(message)

    assert result is None
    mock_archive_store.write_blob.assert_not_called()


@pytest.mark.asyncio
async def test_archive_write_failure_propagates(
    mocker: MockerFixture, snapshot_message: str
) -> None:
    mock_archive_store = mocker.Mock(spec=ArchiveStore)
    mock_archive_store.write_blob.side_effect = OSError("disk full")
    processor = ArchiveProcessor(mock_archive_store)

    with pytest.raises(OSError):
        await processor.process_message(snapshot_message)
