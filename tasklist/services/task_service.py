from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from tasklist.domain.entities import TaskEntity, TaskPatch
from tasklist.infra.repository import TaskRepository

logger = logging.getLogger(__name__)

SEED_TITLES = (
    "Provision the Postgres database",
    "Configure DATABASE_URL",
    "Start the API server",
    "Create the first task",
    "Mark a task as completed",
    "Rename a task",
    "Delete a finished task",
    "Check the CRUD flow end to end",
)


@dataclass(frozen=True)
class SeedResult:
    message: str
    inserted: int
    total: int
    seeded: bool


def build_patch(data: Mapping[str, Any]) -> TaskPatch:
    """Keep only the fields a patch may carry, dropping values of the wrong type."""
    title = data.get("title")
    completed = data.get("completed")
    return TaskPatch(
        title=title if isinstance(title, str) else None,
        completed=completed if isinstance(completed, bool) else None,
    )


class TaskService:
    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    async def list_tasks(self) -> list[TaskEntity]:
        return await self._repo.list_tasks()

    async def create_task(self, title: str) -> TaskEntity:
        return await self._repo.create_task(title)

    async def update_task(self, task_id: int, patch: TaskPatch) -> TaskEntity | None:
        return await self._repo.update_task(task_id, patch)

    async def delete_task(self, task_id: int) -> TaskEntity | None:
        return await self._repo.delete_task(task_id)

    async def seed(self, force: bool = False) -> SeedResult:
        existing = await self._repo.list_tasks()
        if existing and not force:
            logger.info("Seed skipped, %s tasks already stored", len(existing))
            return SeedResult(
                message="Tasks already exist. Use ?force=true to append seed data.",
                inserted=0,
                total=len(existing),
                seeded=False,
            )

        created = await self._repo.create_many(SEED_TITLES)
        total = len(await self._repo.list_tasks())
        logger.info("Seeded %s tasks, %s stored in total", len(created), total)
        return SeedResult(
            message="Seed complete.",
            inserted=len(created),
            total=total,
            seeded=True,
        )
