# tasklist/data_model.py

from typing import Optional, Union
from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from enum import Enum

from .errors import TaskId


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Union["Priority", str, None]) -> "Priority":
        """Return the matching priority; blank means LOW. Raises ValueError otherwise."""
        if isinstance(raw, cls):
            return raw
        if raw is None or not str(raw).strip():
            return cls.LOW
        return cls(str(raw).strip().lower())


class Filter(Enum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


def parse_due_date(raw: Union[date, str, None]) -> Optional[date]:
    """Turn a date, an ISO 'YYYY-MM-DD' string, '' or None into an optional date."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise TypeError(f"invalid due date: {raw!r}")
    raw = raw.strip()
    if not raw:
        return None
    return date.fromisoformat(raw)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """Represents a single task in the task list."""
    id: TaskId
    text: str
    completed: bool = False
    priority: Priority = Priority.LOW
    due_date: Optional[date] = None
    category: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """A pending task whose due date has already passed."""
        if self.completed or not self.due_date:
            return False
        return self.due_date < (today or date.today())

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against text and category."""
        if not query:
            return True
        query = query.lower()
        if query in self.text.lower():
            return True
        return bool(self.category) and query in self.category.lower()

    def to_dict(self) -> dict:
        """Convert Task to a dictionary for JSON serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat() if self.due_date else "",
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a dictionary (JSON deserialization).

        Raises KeyError, TypeError or ValueError when the record is not a
        stored task. An unknown priority falls back to low.
        """
        task_id = data["id"]
        if isinstance(task_id, bool) or not isinstance(task_id, (int, str)):
            raise TypeError(f"invalid task id: {task_id!r}")
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError(f"invalid task text: {text!r}")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise TypeError(f"invalid completed flag: {completed!r}")

        try:
            priority = Priority.parse(data.get("priority"))
        except ValueError:
            priority = Priority.LOW

        created_raw = data.get("createdAt")
        if created_raw:
            created_at = datetime.fromisoformat(str(created_raw).replace("Z", "+00:00"))
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
        else:
            created_at = utcnow()

        return cls(
            id=task_id,
            text=text,
            completed=completed,
            priority=priority,
            due_date=parse_due_date(data.get("dueDate") or None),
            category=str(data.get("category") or ""),
            created_at=created_at,
        )

    def __repr__(self):
        return f"Task(id={self.id}, text={self.text}, completed={self.completed})"
