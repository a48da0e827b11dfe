import logging
import re
import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from todo_api.errors import (
    InvalidIdentifier,
    InvalidInput,
    NotFound,
    PersistenceFailure,
    TaskStorageError,
)
from todo_api.models.task import Task, utc_now_iso
from todo_api.storage.task_storage import TaskRecord, TaskStore

logger = logging.getLogger(__name__)

# Leading integer, trailing characters ignored ("12abc" -> 12)
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_task_id(raw: Any) -> Union[int, str]:
    """
    Parse a path-supplied task id.
    Raises InvalidIdentifier when there is no leading integer.

    Digit strings too long for int() come back unconverted; no stored id
    can equal them, so the lookup ends in NotFound.
    """
    match = _LEADING_INT.match(str(raw))
    if not match:
        raise InvalidIdentifier()
    digits = match.group(1)
    try:
        return int(digits)
    except ValueError:
        return digits


def next_task_id(tasks: List[TaskRecord]) -> int:
    """max(id) + 1, or 1 for an empty collection."""
    ids = [_record_id(t) for t in tasks]
    ids = [i for i in ids if i is not None]
    if not ids:
        return 1
    return max(ids) + 1


def _record_id(task: Any) -> Optional[int]:
    if not isinstance(task, dict):
        return None
    value = task.get("id")
    # bool is an int subclass; a stored `true` is not an id
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _find_task(tasks: List[TaskRecord], task_id: Union[int, str]) -> Tuple[int, Optional[TaskRecord]]:
    for index, task in enumerate(tasks):
        if _record_id(task) == task_id:
            return index, task
    return -1, None


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


class TaskService:
    """
    CRUD over the task collection.

    Every call is a self-contained load -> validate/mutate -> save cycle.
    Validation always runs before the store is touched, so a rejected request
    never writes. The lock serialises cycles on one service instance so two
    concurrent writes cannot drop each other's changes.
    """

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self._lock = threading.Lock()

    def list_tasks(self) -> List[TaskRecord]:
        with self._lock:
            return self.store.load()

    def get_task(self, raw_id: Any) -> TaskRecord:
        task_id = parse_task_id(raw_id)
        with self._lock:
            _, task = _find_task(self.store.load(), task_id)
        if task is None:
            raise NotFound(task_id)
        return task

    def create_task(self, payload: Mapping[str, Any]) -> TaskRecord:
        title = payload.get("title")
        description = payload.get("description")

        if _is_blank(title):
            raise InvalidInput("Title is required and must be a non-empty string")
        if description is not None and not isinstance(description, str):
            raise InvalidInput("Description must be a string")

        with self._lock:
            tasks = self.store.load()
            task = Task(
                id=next_task_id(tasks),
                title=title.strip(),
                description=description.strip() if description else "",
            ).to_record()
            tasks.append(task)
            self._save(tasks, "Failed to save task")

        logger.info("Created task %s", task["id"])
        return task

    def update_task(self, raw_id: Any, payload: Mapping[str, Any]) -> TaskRecord:
        task_id = parse_task_id(raw_id)

        # An explicit null counts as provided, and is rejected.
        if "title" in payload and _is_blank(payload["title"]):
            raise InvalidInput("Title must be a non-empty string")
        if "description" in payload and not isinstance(payload["description"], str):
            raise InvalidInput("Description must be a string")
        if "completed" in payload and not isinstance(payload["completed"], bool):
            raise InvalidInput("Completed must be a boolean")

        with self._lock:
            tasks = self.store.load()
            _, task = _find_task(tasks, task_id)
            if task is None:
                raise NotFound(task_id)

            if "title" in payload:
                task["title"] = payload["title"].strip()
            if "description" in payload:
                task["description"] = payload["description"].strip()
            if "completed" in payload:
                task["completed"] = payload["completed"]
            task["updatedAt"] = utc_now_iso()

            self._save(tasks, "Failed to update task")

        logger.info("Updated task %s", task_id)
        return task

    def delete_task(self, raw_id: Any) -> Dict[str, Any]:
        task_id = parse_task_id(raw_id)

        with self._lock:
            tasks = self.store.load()
            index, task = _find_task(tasks, task_id)
            if task is None:
                raise NotFound(task_id)
            del tasks[index]
            self._save(tasks, "Failed to delete task")

        logger.info("Deleted task %s", task_id)
        return {"message": "Task deleted successfully", "id": task_id}

    def _save(self, tasks: List[TaskRecord], failure_message: str) -> None:
        try:
            self.store.save(tasks)
        except TaskStorageError as e:
            raise PersistenceFailure(failure_message) from e
