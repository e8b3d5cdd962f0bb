from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

TITLE_MAX_LENGTH = 140
# Upper bound of the Postgres INTEGER primary key.
MAX_TASK_ID = 2**31 - 1


@dataclass(frozen=True)
class TaskEntity:
    id: int
    title: str
    completed: bool
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class TaskPatch:
    """Fields left as None keep their stored value."""

    title: Optional[str] = None
    completed: Optional[bool] = None

    def is_empty(self) -> bool:
        return self.title is None and self.completed is None
