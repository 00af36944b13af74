import asyncio
from sqlalchemy import create_engine, delete, update
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.exc import IntegrityError

from src.common.exceptions import (
    ConcurrencyConflictException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from src.tasks.schemas import Task, TaskStatus
from src.tasks.store.base import TaskStore, generate_version_token
from src.tasks.store.postgres.model import Base, TaskModel


class PostgresTaskStore(TaskStore):
    """SQLAlchemy task store.

    Sessions are blocking, so each operation runs in a worker thread. The
    compare-and-swap is a single conditional ``UPDATE``/``DELETE`` filtered on
    the expected version token; zero affected rows means the token was stale
    or the row is gone.
    """

    def __init__(self, database_url: str):
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    def _map_task(self, task: TaskModel) -> Task:
        return Task(
            partition_key=task.partition_key,
            id=task.id,
            name=task.name,
            status=TaskStatus(task.status),
            due_date=task.due_date,
            version_token=task.version_token,
        )

    def _raise_for_missed_write(
        self, session: Session, partition_key: str, task_id: str
    ) -> None:
        if session.get(TaskModel, (partition_key, task_id)) is None:
            raise ResourceNotFoundException(
                ResourceType.TASK, f"{partition_key}/{task_id}"
            )
        raise ConcurrencyConflictException(ResourceType.TASK, task_id)

    def _insert_task(self, task: Task) -> Task:
        version_token = generate_version_token()

        with self.Session() as session:
            new_task = TaskModel(
                partition_key=task.partition_key,
                id=task.id,
                name=task.name,
                status=task.status.value,
                due_date=task.due_date,
                version_token=version_token,
            )

            try:
                session.add(new_task)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ResourceAlreadyExistsException(ResourceType.TASK, task.id) from e

        return task.model_copy(update={"version_token": version_token})

    def _get_task(self, partition_key: str, task_id: str) -> Task:
        with self.Session() as session:
            task = session.get(TaskModel, (partition_key, task_id))

            if not task:
                raise ResourceNotFoundException(
                    ResourceType.TASK, f"{partition_key}/{task_id}"
                )

            return self._map_task(task)

    def _update_task_if_version_matches(
        self, task: Task, expected_version: str
    ) -> Task:
        version_token = generate_version_token()

        with self.Session() as session:
            result = session.execute(
                update(TaskModel)
                .where(
                    TaskModel.partition_key == task.partition_key,
                    TaskModel.id == task.id,
                    TaskModel.version_token == expected_version,
                )
                .values(
                    name=task.name,
                    status=task.status.value,
                    due_date=task.due_date,
                    version_token=version_token,
                )
            )

            if result.rowcount == 0:  # type: ignore
                session.rollback()
                self._raise_for_missed_write(session, task.partition_key, task.id)

            session.commit()

        return task.model_copy(update={"version_token": version_token})

    def _delete_task(
        self, partition_key: str, task_id: str, expected_version: str | None
    ) -> None:
        with self.Session() as session:
            statement = delete(TaskModel).where(
                TaskModel.partition_key == partition_key,
                TaskModel.id == task_id,
            )
            if expected_version is not None:
                statement = statement.where(
                    TaskModel.version_token == expected_version
                )

            result = session.execute(statement)

            if result.rowcount == 0:  # type: ignore
                session.rollback()
                self._raise_for_missed_write(session, partition_key, task_id)

            session.commit()

    async def insert_task(self, task: Task) -> Task:
        return await asyncio.to_thread(self._insert_task, task)

    async def get_task(self, partition_key: str, task_id: str) -> Task:
        return await asyncio.to_thread(self._get_task, partition_key, task_id)

    async def update_task_if_version_matches(
        self, task: Task, expected_version: str
    ) -> Task:
        return await asyncio.to_thread(
            self._update_task_if_version_matches, task, expected_version
        )

    async def delete_task(
        self, partition_key: str, task_id: str, expected_version: str | None = None
    ) -> None:
        await asyncio.to_thread(
            self._delete_task, partition_key, task_id, expected_version
        )
