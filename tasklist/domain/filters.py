from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .entities import TaskEntity
from .enums import TaskFilter


@dataclass(frozen=True)
class TaskCounts:
    active: int
    completed: int
    total: int


def filter_tasks(tasks: Iterable[TaskEntity], task_filter: TaskFilter) -> list[TaskEntity]:
    if task_filter == TaskFilter.ACTIVE:
        return [task for task in tasks if not task.completed]
    if task_filter == TaskFilter.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)


def count_tasks(tasks: Iterable[TaskEntity]) -> TaskCounts:
    items = list(tasks)
    completed = sum(1 for task in items if task.completed)
    return TaskCounts(active=len(items) - completed, completed=completed, total=len(items))
