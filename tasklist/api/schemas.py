from __future__ import annotations

from pydantic import BaseModel


class TaskOut(BaseModel):
    id: int
    title: str
    completed: bool
    created_at: str
    updated_at: str


class TaskResponse(BaseModel):
    task: TaskOut


class TaskListResponse(BaseModel):
    tasks: list[TaskOut]


class SeedResponse(BaseModel):
    message: str
    inserted: int
    total: int


class ErrorResponse(BaseModel):
    error: str
