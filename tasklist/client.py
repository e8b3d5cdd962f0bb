from __future__ import annotations

from typing import Any, Optional

import httpx

from tasklist.domain.entities import TaskEntity


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _task_from_json(data: dict[str, Any]) -> TaskEntity:
    return TaskEntity(
        id=int(data["id"]),
        title=str(data["title"]),
        completed=bool(data["completed"]),
        created_at=str(data["created_at"]),
        updated_at=str(data["updated_at"]),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return response.reason_phrase


class TaskApiClient:
    """Blocking client for the task HTTP API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if http is None:
            if not base_url:
                raise ValueError("base_url is required when no http client is given")
            http = httpx.Client(base_url=base_url, timeout=timeout)
        self._http = http

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def list_tasks(self) -> list[TaskEntity]:
        payload = self._request("GET", "/tasks")
        return [_task_from_json(item) for item in payload["tasks"]]

    def create_task(self, title: str) -> TaskEntity:
        payload = self._request("POST", "/tasks", json={"title": title})
        return _task_from_json(payload["task"])

    def update_task(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> TaskEntity | None:
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if completed is not None:
            body["completed"] = completed
        payload = self._request("PATCH", f"/tasks/{task_id}", json=body, allow_missing=True)
        return _task_from_json(payload["task"]) if payload else None

    def delete_task(self, task_id: int) -> TaskEntity | None:
        payload = self._request("DELETE", f"/tasks/{task_id}", allow_missing=True)
        return _task_from_json(payload["task"]) if payload else None

    def seed(self, token: str, force: bool = False) -> dict[str, Any]:
        return self._request(
            "POST",
            "/seed",
            params={"force": "true" if force else "false"},
            headers={"x-seed-token": token},
        )

    def _request(self, method: str, path: str, *, allow_missing: bool = False, **kwargs) -> Any:
        response = self._http.request(method, path, **kwargs)
        if allow_missing and response.status_code == 404:
            return None
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()
