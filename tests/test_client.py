from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tasklist.client import ApiError, TaskApiClient


@pytest.fixture()
def api(client: TestClient) -> TaskApiClient:
    return TaskApiClient(http=client)


def test_client_round_trip(api: TaskApiClient) -> None:
    created = api.create_task("  Water plants ")
    assert created.title == "Water plants"

    renamed = api.update_task(created.id, title="Water the plants")
    assert renamed is not None
    assert renamed.title == "Water the plants"

    done = api.update_task(created.id, completed=True)
    assert done is not None and done.completed is True

    assert api.list_tasks() == [done]
    assert api.delete_task(created.id) == done
    assert api.list_tasks() == []


def test_client_returns_none_for_missing_task(api: TaskApiClient) -> None:
    assert api.update_task(123, completed=True) is None
    assert api.delete_task(123) is None


def test_client_raises_api_error_with_server_message(api: TaskApiClient) -> None:
    with pytest.raises(ApiError) as excinfo:
        api.create_task("   ")

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Task title is required."


def test_client_seed(api: TaskApiClient, seed_token: str) -> None:
    result = api.seed(seed_token)
    assert result["message"] == "Seed complete."

    with pytest.raises(ApiError) as excinfo:
        api.seed("nope", force=True)
    assert excinfo.value.status_code == 401


def test_client_requires_base_url() -> None:
    with pytest.raises(ValueError):
        TaskApiClient()
