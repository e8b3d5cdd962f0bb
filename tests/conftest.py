from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from tasklist.api.app import create_app
from tasklist.config import Settings
from tasklist.infra.db import StorageContext
from tasklist.infra.repository import TaskRepository

SEED_TOKEN = "seed-secret"


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'tasks.sqlite3'}"


@pytest_asyncio.fixture()
async def storage(database_url: str):
    context = StorageContext(database_url)
    yield context
    await context.dispose()


@pytest_asyncio.fixture()
async def repo(storage: StorageContext) -> TaskRepository:
    return TaskRepository(storage)


@pytest.fixture()
def settings(tmp_path: Path, database_url: str) -> Settings:
    return Settings(
        database_url=database_url,
        seed_token=SEED_TOKEN,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture()
def seed_token() -> str:
    return SEED_TOKEN
