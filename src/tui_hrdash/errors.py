"""Task store exceptions."""

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for failures reported by a task store."""


class ValidationError(TaskStoreError):
    """Raised when task data fails validation on create or update."""

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(TaskStoreError):
    """Raised when a task id does not exist in the store."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Task not found: {item_id}")
        self.item_id = item_id
