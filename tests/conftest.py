# tests/conftest.py

from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.storage.task_storage import JsonFileTaskStore


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.test.json"


@pytest.fixture()
def store(tasks_file: Path) -> JsonFileTaskStore:
    return JsonFileTaskStore(tasks_file)


@pytest.fixture()
def settings(tasks_file: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_app.
    Avoids reading the real environment so tests stay deterministic.
    """
    return SimpleNamespace(
        host="127.0.0.1",
        port=3000,
        tasks_file=tasks_file,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture()
def client(store: JsonFileTaskStore, settings: SimpleNamespace) -> TestClient:
    # Let the 500 handler answer instead of re-raising into the test
    app = create_app(store=store, settings=settings)
    return TestClient(app, raise_server_exceptions=False)
