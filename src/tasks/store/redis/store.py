from datetime import date
from typing import TypedDict
from redis.asyncio.client import Pipeline
from redis.exceptions import WatchError

from src.common.redis import RedisClient
from src.common.exceptions import (
    ConcurrencyConflictException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from src.tasks.schemas import Task, TaskStatus
from src.tasks.store.base import TaskStore, generate_version_token


class TaskMapping(TypedDict):
    partition_key: str
    id: str
    name: str
    status: str
    due_date: str
    version_token: str


class RedisTaskStore(TaskStore):
    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_task_key(self, partition_key: str, task_id: str) -> str:
        return f"{self.key_prefix}:{partition_key}:{task_id}"

    def _to_mapping(self, task: Task, version_token: str) -> TaskMapping:
        return {
            "partition_key": task.partition_key,
            "id": task.id,
            "name": task.name,
            "status": task.status.value,
            "due_date": task.due_date.isoformat() if task.due_date else "",
            "version_token": version_token,
        }

    def _map_task(self, fields: dict[str, str]) -> Task:
        return Task(
            partition_key=fields["partition_key"],
            id=fields["id"],
            name=fields["name"],
            status=TaskStatus(fields["status"]),
            due_date=(
                date.fromisoformat(fields["due_date"]) if fields["due_date"] else None
            ),
            version_token=fields["version_token"],
        )

    async def _watch_version(
        self, pipe: Pipeline, partition_key: str, task_id: str, expected_version: str
    ) -> None:
        task_key = self._get_task_key(partition_key, task_id)
        await pipe.watch(task_key)
        current_version = await pipe.hget(task_key, "version_token")

        if current_version is None:
            raise ResourceNotFoundException(
                ResourceType.TASK, f"{partition_key}/{task_id}"
            )
        if current_version != expected_version:
            raise ConcurrencyConflictException(ResourceType.TASK, task_id)

    async def insert_task(self, task: Task) -> Task:
        task_key = self._get_task_key(task.partition_key, task.id)
        version_token = generate_version_token()

        async with self.client.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(task_key)
                if await pipe.exists(task_key):
                    raise ResourceAlreadyExistsException(ResourceType.TASK, task.id)

                pipe.multi()
                pipe.hset(task_key, mapping=self._to_mapping(task, version_token))  # type: ignore
                await pipe.execute()
            except WatchError as e:
                raise ResourceAlreadyExistsException(ResourceType.TASK, task.id) from e

        return task.model_copy(update={"version_token": version_token})

    async def get_task(self, partition_key: str, task_id: str) -> Task:
        fields = await self.client.hgetall(self._get_task_key(partition_key, task_id))

        if not fields:
            raise ResourceNotFoundException(
                ResourceType.TASK, f"{partition_key}/{task_id}"
            )

        return self._map_task(fields)

    async def update_task_if_version_matches(
        self, task: Task, expected_version: str
    ) -> Task:
        task_key = self._get_task_key(task.partition_key, task.id)
        version_token = generate_version_token()

        async with self.client.pipeline(transaction=True) as pipe:
            try:
                await self._watch_version(
                    pipe, task.partition_key, task.id, expected_version
                )

                pipe.multi()
                pipe.hset(task_key, mapping=self._to_mapping(task, version_token))  # type: ignore
                await pipe.execute()
            except WatchError as e:
                raise ConcurrencyConflictException(ResourceType.TASK, task.id) from e

        return task.model_copy(update={"version_token": version_token})

    async def delete_task(
        self, partition_key: str, task_id: str, expected_version: str | None = None
    ) -> None:
        task_key = self._get_task_key(partition_key, task_id)

        if expected_version is None:
            if not await self.client.delete(task_key):
                raise ResourceNotFoundException(
                    ResourceType.TASK, f"{partition_key}/{task_id}"
                )
            return

        async with self.client.pipeline(transaction=True) as pipe:
            try:
                await self._watch_version(
                    pipe, partition_key, task_id, expected_version
                )

                pipe.multi()
                pipe.delete(task_key)
                await pipe.execute()
            except WatchError as e:
                raise ConcurrencyConflictException(ResourceType.TASK, task_id) from e
