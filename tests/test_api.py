from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from tasklist.api.app import create_app
from tasklist.services.task_service import SEED_TITLES


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_task_crud_flow(client: TestClient) -> None:
    create_resp = client.post("/tasks", json={"title": "Buy milk"})
    assert create_resp.status_code == 201
    task = create_resp.json()["task"]
    assert task["title"] == "Buy milk"
    assert task["completed"] is False
    assert task["created_at"] == task["updated_at"]

    list_resp = client.get("/tasks")
    assert list_resp.status_code == 200
    assert list_resp.json() == {"tasks": [task]}

    patch_resp = client.patch(f"/tasks/{task['id']}", json={"completed": True})
    assert patch_resp.status_code == 200
    updated = patch_resp.json()["task"]
    assert updated["id"] == task["id"]
    assert updated["completed"] is True
    assert updated["created_at"] == task["created_at"]

    delete_resp = client.delete(f"/tasks/{task['id']}")
    assert delete_resp.status_code == 200
    assert delete_resp.json()["task"] == updated

    assert client.get("/tasks").json() == {"tasks": []}


def test_create_rejects_blank_or_missing_title(client: TestClient) -> None:
    for body in ({"title": "   "}, {"title": 12}, {}):
        response = client.post("/tasks", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Task title is required."}

    assert client.get("/tasks").json()["tasks"] == []


def test_malformed_json_is_a_client_error(client: TestClient) -> None:
    response = client.post(
        "/tasks",
        content="{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_patch_without_recognized_fields(client: TestClient) -> None:
    task = client.post("/tasks", json={"title": "Keep"}).json()["task"]

    response = client.patch(f"/tasks/{task['id']}", json={"title": 1, "done": True})

    assert response.status_code == 400
    assert response.json() == {"error": "No valid fields to update."}


def test_patch_blank_title_is_rejected(client: TestClient) -> None:
    task = client.post("/tasks", json={"title": "Keep"}).json()["task"]

    response = client.patch(f"/tasks/{task['id']}", json={"title": "  "})

    assert response.status_code == 400
    assert response.json() == {"error": "Task title cannot be empty."}
    assert client.get("/tasks").json()["tasks"] == [task]


def test_patch_and_delete_missing_task(client: TestClient) -> None:
    patch_resp = client.patch("/tasks/999", json={"completed": True})
    assert patch_resp.status_code == 404
    assert patch_resp.json() == {"error": "Task not found."}

    delete_resp = client.delete("/tasks/999")
    assert delete_resp.status_code == 404


def test_ids_beyond_integer_range_are_not_found(client: TestClient) -> None:
    huge = "99999999999999999999"

    patch_resp = client.patch(f"/tasks/{huge}", json={"completed": True})
    assert patch_resp.status_code == 404
    assert patch_resp.json() == {"error": "Task not found."}

    delete_resp = client.delete(f"/tasks/{huge}")
    assert delete_resp.status_code == 404
    assert delete_resp.json() == {"error": "Task not found."}


def test_invalid_task_id(client: TestClient) -> None:
    for raw_id in ("abc", "0", "-3", "\u00b2", "\u0663"):
        assert client.patch(f"/tasks/{raw_id}", json={"completed": True}).status_code == 400
        response = client.delete(f"/tasks/{raw_id}")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task id."}


def test_storage_failure_maps_to_500(client: TestClient, monkeypatch) -> None:
    async def broken() -> None:
        raise OperationalError("CREATE TABLE tasks", {}, Exception("connection refused"))

    monkeypatch.setattr(client.app.state.storage, "_create_schema", broken)

    response = client.get("/tasks")

    assert response.status_code == 500
    assert response.json() == {"error": "Storage error."}


def test_seed_requires_matching_token(client: TestClient) -> None:
    assert client.post("/seed").status_code == 401
    response = client.post("/seed", headers={"x-seed-token": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized."}


def test_seed_without_configured_token(settings) -> None:
    app = create_app(replace(settings, seed_token=None))
    with TestClient(app) as client:
        response = client.post("/seed", headers={"x-seed-token": "anything"})

    assert response.status_code == 400
    assert response.json() == {"error": "SEED_TOKEN is not configured."}


def test_seed_inserts_once_unless_forced(client: TestClient, seed_token: str) -> None:
    headers = {"x-seed-token": seed_token}

    first = client.post("/seed", headers=headers)
    assert first.status_code == 201
    assert first.json() == {
        "message": "Seed complete.",
        "inserted": len(SEED_TITLES),
        "total": len(SEED_TITLES),
    }

    second = client.post("/seed", headers=headers)
    assert second.status_code == 200
    assert second.json()["inserted"] == 0
    assert second.json()["total"] == len(SEED_TITLES)

    forced = client.post("/seed?force=true", headers=headers)
    assert forced.status_code == 201
    assert forced.json()["inserted"] == len(SEED_TITLES)
    assert forced.json()["total"] == 2 * len(SEED_TITLES)


def test_seed_forces_only_on_literal_true(client: TestClient, seed_token: str) -> None:
    headers = {"x-seed-token": seed_token}
    assert client.post("/seed", headers=headers).status_code == 201

    for value in ("1", "yes", "banana", "True"):
        response = client.post(f"/seed?force={value}", headers=headers)
        assert response.status_code == 200
        assert response.json()["inserted"] == 0
        assert response.json()["total"] == len(SEED_TITLES)
