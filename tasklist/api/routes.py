from __future__ import annotations

import hmac
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Query
from fastapi.responses import JSONResponse

from tasklist.config import Settings
from tasklist.services.task_service import TaskService, build_patch

from .deps import get_settings, get_task_service
from .schemas import ErrorResponse, SeedResponse, TaskListResponse, TaskResponse

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _parse_task_id(raw: str) -> int | None:
    if not (raw.isascii() and raw.isdigit()):
        return None
    task_id = int(raw)
    return task_id if task_id > 0 else None


@router.get("/healthz")
async def healthz() -> dict:
    return {"ok": True}


@router.get("/tasks", response_model=TaskListResponse, responses=ERROR_RESPONSES)
async def list_tasks(service: TaskService = Depends(get_task_service)):
    tasks = await service.list_tasks()
    return {"tasks": [task.to_dict() for task in tasks]}


@router.post("/tasks", status_code=201, response_model=TaskResponse, responses=ERROR_RESPONSES)
async def create_task(
    payload: Optional[dict[str, Any]] = Body(default=None),
    service: TaskService = Depends(get_task_service),
):
    title = (payload or {}).get("title")
    task = await service.create_task(title if isinstance(title, str) else "")
    return {"task": task.to_dict()}


@router.patch(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
async def update_task(
    task_id: str,
    payload: Optional[dict[str, Any]] = Body(default=None),
    service: TaskService = Depends(get_task_service),
):
    parsed_id = _parse_task_id(task_id)
    if parsed_id is None:
        return error_response(400, "Invalid task id.")

    patch = build_patch(payload or {})
    if patch.is_empty():
        return error_response(400, "No valid fields to update.")

    task = await service.update_task(parsed_id, patch)
    if task is None:
        return error_response(404, "Task not found.")
    return {"task": task.to_dict()}


@router.delete(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    parsed_id = _parse_task_id(task_id)
    if parsed_id is None:
        return error_response(400, "Invalid task id.")

    task = await service.delete_task(parsed_id)
    if task is None:
        return error_response(404, "Task not found.")
    return {"task": task.to_dict()}


@router.post(
    "/seed",
    status_code=201,
    response_model=SeedResponse,
    responses={**ERROR_RESPONSES, 401: {"model": ErrorResponse}},
)
async def seed_tasks(
    force: Optional[str] = Query(default=None),
    x_seed_token: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    service: TaskService = Depends(get_task_service),
):
    if not settings.seed_token:
        return error_response(400, "SEED_TOKEN is not configured.")
    if x_seed_token is None or not hmac.compare_digest(x_seed_token, settings.seed_token):
        return error_response(401, "Unauthorized.")

    result = await service.seed(force=force == "true")
    body = {"message": result.message, "inserted": result.inserted, "total": result.total}
    return JSONResponse(body, status_code=201 if result.seeded else 200)
