"""Request-scoped accessors for objects built in the app lifespan."""

from __future__ import annotations

from fastapi import Request

from tasklist.config import Settings
from tasklist.services.task_service import TaskService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service
