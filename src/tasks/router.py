from fastapi import APIRouter, Depends, Header, status

from src.common.exceptions import (
    ResourceType,
    bad_request_response,
    concurrency_conflict_response,
    resource_not_found_response,
)
from src.common.workers_enabled_check import workers_enabled_check
from src.tasks.dependencies import get_task_service
from src.tasks.schemas import (
    CreateTaskRequest,
    Task,
    TaskMessage,
    UpdateTaskRequest,
)
from src.tasks.service import TaskService


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


@router.get(
    "/{partition_key}/{task_id}",
    responses={**resource_not_found_response(ResourceType.TASK)},
)
async def get_task(
    partition_key: str,
    task_id: str,
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return await task_service.get_task(partition_key, task_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(workers_enabled_check)],
    responses={**bad_request_response},
)
async def create_task(
    task_input: CreateTaskRequest,
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return await task_service.create_task(task_input)


@router.put(
    "/{partition_key}/{task_id}",
    dependencies=[Depends(workers_enabled_check)],
    responses={
        **bad_request_response,
        **resource_not_found_response(ResourceType.TASK),
        **concurrency_conflict_response(ResourceType.TASK),
    },
)
async def update_task(
    partition_key: str,
    task_id: str,
    task_input: UpdateTaskRequest,
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return await task_service.update_task(partition_key, task_id, task_input)


@router.delete(
    "/{partition_key}/{task_id}",
    responses={
        **resource_not_found_response(ResourceType.TASK),
        **concurrency_conflict_response(ResourceType.TASK),
    },
)
async def delete_task(
    partition_key: str,
    task_id: str,
    if_match: str | None = Header(default=None),
    task_service: TaskService = Depends(get_task_service),
) -> TaskMessage:
    version_token = if_match.strip('"') if if_match else None
    await task_service.delete_task(partition_key, task_id, version_token=version_token)
    return TaskMessage(message="Task has been deleted.")
