# tasklist/errors.py

from typing import Union

TaskId = Union[int, str]


class TaskListError(Exception):
    """Base class for all task list errors."""


class ValidationError(TaskListError):
    """Rejected input, e.g. an empty task description or unknown filter."""


class NotFoundError(TaskListError):
    """An operation referenced a task id that is not in the collection."""

    def __init__(self, task_id: TaskId):
        super().__init__(f"Task {task_id!r} not found")
        self.task_id = task_id


class PersistenceError(TaskListError):
    """Reading from or writing to durable storage failed."""
