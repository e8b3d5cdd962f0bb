from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Iterable, Mapping, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from tasklist.domain.entities import MAX_TASK_ID, TaskEntity, TaskPatch
from tasklist.domain.errors import MalformedRowError, StorageError, ValidationError

from .db import StorageContext
from .models import TaskModel

TASK_COLUMNS = (
    TaskModel.id,
    TaskModel.title,
    TaskModel.completed,
    TaskModel.created_at,
    TaskModel.updated_at,
)
REQUIRED_FIELDS = ("id", "title", "completed", "created_at", "updated_at")


def _format_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_record(row: Mapping[str, Any]) -> TaskEntity:
    missing = [name for name in REQUIRED_FIELDS if row.get(name) is None]
    if missing:
        raise MalformedRowError(f"Task row is missing fields: {', '.join(missing)}")
    return TaskEntity(
        id=int(row["id"]),
        title=str(row["title"]),
        completed=bool(row["completed"]),
        created_at=_format_timestamp(row["created_at"]),
        updated_at=_format_timestamp(row["updated_at"]),
    )


@asynccontextmanager
async def _storage_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        raise StorageError(f"Could not {action}: {exc}") from exc


class TaskRepository:
    def __init__(self, storage: StorageContext) -> None:
        self._storage = storage

    async def list_tasks(self) -> list[TaskEntity]:
        await self._storage.ensure_schema()
        stmt = select(*TASK_COLUMNS).order_by(
            TaskModel.created_at.desc(),
            TaskModel.id.desc(),
        )
        async with _storage_errors("list tasks"):
            async with self._storage.session() as session:
                result = await session.execute(stmt)
                rows = result.mappings().all()
        return [to_record(row) for row in rows]

    async def get_task(self, task_id: int) -> Optional[TaskEntity]:
        await self._storage.ensure_schema()
        if not 0 < task_id <= MAX_TASK_ID:
            return None
        stmt = select(*TASK_COLUMNS).where(TaskModel.id == task_id).limit(1)
        async with _storage_errors("read task"):
            async with self._storage.session() as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
        return to_record(row) if row else None

    async def create_task(self, title: str) -> TaskEntity:
        await self._storage.ensure_schema()
        trimmed = title.strip()
        if not trimmed:
            raise ValidationError("Task title is required.")

        stmt = insert(TaskModel).values(title=trimmed).returning(*TASK_COLUMNS)
        async with _storage_errors("create task"):
            async with self._storage.session() as session, session.begin():
                result = await session.execute(stmt)
                row = result.mappings().one()
        return to_record(row)

    async def update_task(self, task_id: int, patch: TaskPatch) -> Optional[TaskEntity]:
        # Read-modify-write without a row lock: concurrent updates to the
        # same task can overwrite each other.
        current = await self.get_task(task_id)
        if current is None:
            return None

        next_title = patch.title.strip() if patch.title is not None else current.title
        next_completed = patch.completed if patch.completed is not None else current.completed
        if not next_title:
            raise ValidationError("Task title cannot be empty.")

        stmt = (
            update(TaskModel)
            .where(TaskModel.id == task_id)
            .values(title=next_title, completed=next_completed, updated_at=func.now())
            .returning(*TASK_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        async with _storage_errors("update task"):
            async with self._storage.session() as session, session.begin():
                result = await session.execute(stmt)
                row = result.mappings().first()
        return to_record(row) if row else None

    async def delete_task(self, task_id: int) -> Optional[TaskEntity]:
        await self._storage.ensure_schema()
        if not 0 < task_id <= MAX_TASK_ID:
            return None
        stmt = (
            delete(TaskModel)
            .where(TaskModel.id == task_id)
            .returning(*TASK_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        async with _storage_errors("delete task"):
            async with self._storage.session() as session, session.begin():
                result = await session.execute(stmt)
                row = result.mappings().first()
        return to_record(row) if row else None

    async def create_many(self, titles: Iterable[str]) -> list[TaskEntity]:
        """Create each non-blank title in order; earlier inserts stay committed if a later one fails."""
        created: list[TaskEntity] = []
        for title in titles:
            if not title.strip():
                continue
            created.append(await self.create_task(title))
        return created
