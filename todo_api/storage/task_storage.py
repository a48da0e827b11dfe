import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from todo_api.errors import TaskStorageError

logger = logging.getLogger(__name__)

TaskRecord = Dict[str, Any]


class TaskStore(Protocol):
    """
    Persistence boundary for the task collection.

    load() never fails: a missing or unreadable store is an empty collection.
    save() raises TaskStorageError when the collection could not be written.
    """

    def load(self) -> List[TaskRecord]:
        ...

    def save(self, tasks: List[TaskRecord]) -> None:
        ...


class JsonFileTaskStore:
    """
    Stores the whole collection as one pretty-printed JSON array.
    The file is re-read on every load; nothing is cached between requests.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> List[TaskRecord]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return []

        if raw.strip() == "":
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            # Corrupt store degrades to empty instead of failing the request
            logger.warning("Corrupt tasks file %s, treating as empty: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Tasks file %s does not hold a JSON array, treating as empty", self.path)
            return []
        return data

    def save(self, tasks: List[TaskRecord]) -> None:
        try:
            # Encode fully before the file is opened; opening truncates it
            data = json.dumps(tasks, indent=2, ensure_ascii=False).encode("utf-8")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(data)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write tasks file %s: %s", self.path, e)
            raise TaskStorageError(str(e)) from e


class InMemoryTaskStore:
    """Keeps the collection in process memory. Handy for tests."""

    def __init__(self, tasks: Optional[List[TaskRecord]] = None) -> None:
        self._tasks: List[TaskRecord] = copy.deepcopy(tasks or [])

    def load(self) -> List[TaskRecord]:
        return copy.deepcopy(self._tasks)

    def save(self, tasks: List[TaskRecord]) -> None:
        self._tasks = copy.deepcopy(tasks)
