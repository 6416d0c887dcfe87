# tasklist/persistence.py

import os
import json
import logging
import datetime
from typing import Any, List, Optional

from .data_model import Task
from .errors import PersistenceError

TASKS_KEY = "tasks"
LOGS_KEY = "logs"
MAX_LOGS = 500

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Key-value storage backed by a single JSON object file.

    Every key holds a JSON value. Writes replace the value of one key and
    rewrite the whole file.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[Any]:
        """Return the stored value for key, or None if it was never set."""
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""
        try:
            data = self._read_all()
        except PersistenceError:
            logger.warning("Overwriting unreadable storage file %s", self.path)
            data = {}
        data[key] = value
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e


class TaskPersistence:
    """Loads and saves the task collection and the activity log."""

    def __init__(self, storage: JsonFileStorage, key: str = TASKS_KEY,
                 logs_key: str = LOGS_KEY, max_logs: int = MAX_LOGS):
        self.storage = storage
        self.key = key
        self.logs_key = logs_key
        self.max_logs = max_logs

    def load_tasks(self) -> List[Task]:
        """Load tasks from storage.

        Missing or malformed data yields an empty list. Storage read
        failures are raised as PersistenceError.
        """
        data = self.storage.get_item(self.key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Stored %r is not a list, starting empty", self.key)
            return []
        try:
            return [Task.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed task record in %r (%s), starting empty", self.key, e)
            return []

    def save_tasks(self, tasks: List[Task]) -> None:
        """Persist the full task collection, replacing what was stored."""
        self.storage.set_item(self.key, [t.to_dict() for t in tasks])

    def load_logs(self) -> List[str]:
        """Load activity log entries; anything unreadable gives an empty log."""
        try:
            data = self.storage.get_item(self.logs_key)
        except PersistenceError as e:
            logger.warning("Could not load activity log: %s", e)
            return []
        if not isinstance(data, list):
            return []
        return [str(entry) for entry in data]

    def save_logs(self, logs: List[str]) -> None:
        """Persist activity log entries."""
        self.storage.set_item(self.logs_key, logs)

    def log_action(self, logs: List[str], message: str) -> str:
        """Add a timestamped log entry, trim old entries and persist."""
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        entry = f"[{timestamp}] {message}"
        logs.append(entry)
        if len(logs) > self.max_logs:
            del logs[:len(logs) - self.max_logs]
        self.save_logs(logs)
        return entry
