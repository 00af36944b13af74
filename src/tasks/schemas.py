from datetime import date, datetime
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _truncate_to_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    # Anything longer than YYYY-MM-DD carries a time part.
    if isinstance(value, str) and len(value) > 10:
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return value
    return value


class Task(CamelModel):
    """A stored task. Also the shape of queue messages and archive blobs."""

    partition_key: str
    id: str
    name: str = Field(min_length=1)
    status: TaskStatus
    due_date: date | None = None
    version_token: str | None = None

    @field_validator("due_date", mode="before")
    def validate_due_date(cls, value: Any):
        return _truncate_to_date(value)

    def to_snapshot_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class CreateTaskRequest(CamelModel):
    name: str | None = None
    due_date: date | None = None

    @field_validator("due_date", mode="before")
    def validate_due_date(cls, value: Any):
        return _truncate_to_date(value)


class UpdateTaskRequest(CamelModel):
    """Partial update. Only fields present in the request body are applied."""

    name: str | None = None
    status: TaskStatus | None = None
    due_date: date | None = None
    version_token: str | None = None

    @field_validator("due_date", mode="before")
    def validate_due_date(cls, value: Any):
        return _truncate_to_date(value)


class TaskMessage(BaseModel):
    message: str
