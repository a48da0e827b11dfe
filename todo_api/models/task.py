from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    """
    Current UTC time as ISO-8601 with millisecond precision, e.g.
    2024-01-01T00:00:00.000Z
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Task(BaseModel):
    """
    A single to-do record.

    Only used when a task is created. The store keeps tasks as plain
    JSON/dicts so hand-written extra fields survive a rewrite.
    """

    id: int
    title: str
    description: str = ""
    completed: bool = False
    createdAt: str = Field(default_factory=utc_now_iso)
    updatedAt: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        # updatedAt only appears after the first update
        return self.model_dump(mode="json", exclude_none=True)
