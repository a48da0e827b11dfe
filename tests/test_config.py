# tests/test_config.py

import logging
from pathlib import Path

import pytest

from todo_api.config import DEFAULT_PORT, Settings
from todo_api.logging_setup import setup_logging


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PORT", "HOST", "TASKS_FILE", "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.port == DEFAULT_PORT
    assert s.host == "127.0.0.1"
    assert s.tasks_file == Path("tasks.json")
    assert s.log_level == "INFO"
    assert s.cors_origins == ["*"]


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("TASKS_FILE", str(tmp_path / "t.json"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    s = Settings.from_env()

    assert s.port == 8080
    assert s.host == "0.0.0.0"
    assert s.tasks_file == tmp_path / "t.json"
    assert s.log_level == "DEBUG"
    assert s.cors_origins == ["http://a.test", "http://b.test"]


def test_bad_port_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")
    assert Settings.from_env().port == DEFAULT_PORT


def test_setup_logging_does_not_stack_handlers() -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging("DEBUG")
        setup_logging("WARNING")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        setup_logging("nonsense")
        assert root.level == logging.INFO
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
