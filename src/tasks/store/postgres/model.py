from datetime import date
from sqlalchemy import Date, String
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from src.config import get_settings


settings = get_settings()

Base = declarative_base()


class TaskModel(Base):
    __tablename__ = settings.TASK_STORE_NAMESPACE

    partition_key: Mapped[str] = mapped_column(String, primary_key=True)
    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    version_token: Mapped[str] = mapped_column(String, nullable=False)

    def __init__(
        self,
        partition_key: str,
        id: str,
        name: str,
        status: str,
        version_token: str,
        due_date: date | None = None,
    ):
        self.partition_key = partition_key
        self.id = id
        self.name = name
        self.status = status
        self.version_token = version_token
        self.due_date = due_date
