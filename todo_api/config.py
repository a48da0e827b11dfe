"""
Settings loaded from environment variables (+ optional .env).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_PORT = 3000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_TASKS_FILE = "tasks.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    tasks_file: Path
    log_level: str
    cors_origins: List[str]

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            host=os.getenv("HOST", DEFAULT_HOST),
            port=_env_int("PORT", DEFAULT_PORT),
            # Relative to the working directory the service is started from.
            tasks_file=_env_path("TASKS_FILE", Path(DEFAULT_TASKS_FILE)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=_env_list("CORS_ORIGINS", ["*"]),
        )


def get_settings() -> Settings:
    """
    Build settings from the current environment.
    Not cached, so tests can monkeypatch env vars between calls.
    """
    return Settings.from_env()
