from typing import Any, Dict, Union


class TaskApiError(Exception):
    """
    Base class for errors that map onto an HTTP response.
    The response body is always a JSON object with an `error` message.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidIdentifier(TaskApiError):
    status_code = 400

    def __init__(self, message: str = "Invalid task ID") -> None:
        super().__init__(message)


class InvalidInput(TaskApiError):
    status_code = 400


class NotFound(TaskApiError):
    status_code = 404

    def __init__(self, task_id: Union[int, str]) -> None:
        super().__init__("Task not found")
        self.task_id = task_id

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "id": self.task_id}


class PersistenceFailure(TaskApiError):
    status_code = 500


class TaskStorageError(Exception):
    """Raised by a store when the collection could not be written."""
