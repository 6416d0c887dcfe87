# tasklist/task_store.py

import time
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, List, NamedTuple, Optional, Union

from .data_model import Task, Priority, Filter, parse_due_date, utcnow
from .errors import TaskId, ValidationError, NotFoundError, PersistenceError
from .persistence import TaskPersistence

logger = logging.getLogger(__name__)


class Stats(NamedTuple):
    total: int
    completed: int
    pending: int


@dataclass
class StoreChange:
    """Notification sent to subscribers after the store state changed.

    `persisted` is True after a successful durable write and False when the
    write failed, with `error` holding the PersistenceError. It is None for
    changes that are never written, such as filter and search updates.
    `task` is a copy of the affected task.
    """
    action: str
    task: Optional[Task] = None
    persisted: Optional[bool] = None
    error: Optional[PersistenceError] = None


Listener = Callable[[StoreChange], None]


class TaskStore:
    """Owns the task collection, the active filter and the search query.

    Every mutation is written through to the persistence adapter before the
    call returns. Subscribers are told about each change and decide for
    themselves whether to re-render.

    Tasks handed out by the store are copies, so callers cannot change an
    id or creation time behind its back.
    """

    def __init__(self, persistence: TaskPersistence,
                 clock: Callable[[], datetime] = utcnow):
        self._persistence = persistence
        self._clock = clock
        self._tasks: List[Task] = []
        self._filter = Filter.ALL
        self._search = ""
        self._last_id = 0
        self._listeners: List[Listener] = []

    # -------------------- state --------------------
    @property
    def tasks(self) -> List[Task]:
        return [replace(t) for t in self._tasks]

    @property
    def filter(self) -> Filter:
        return self._filter

    @property
    def search_query(self) -> str:
        return self._search

    # -------------------- subscriptions --------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    # -------------------- persistence --------------------
    def load(self) -> List[Task]:
        """Replace the collection with what the persistence adapter holds."""
        try:
            loaded = self._persistence.load_tasks()
        except PersistenceError as e:
            logger.warning("Could not load tasks, starting empty: %s", e)
            loaded = []

        seen = set()
        tasks: List[Task] = []
        for task in loaded:
            if task.id in seen:
                logger.warning("Dropping task with duplicate id %r", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        self._tasks = tasks
        int_ids = [t.id for t in tasks if isinstance(t.id, int)]
        self._last_id = max([self._last_id] + int_ids)
        logger.debug("Loaded %d tasks", len(tasks))
        self._notify(StoreChange("loaded"))
        return self.tasks

    def persist(self) -> Optional[PersistenceError]:
        """Write the full collection. Returns the error if the write failed."""
        try:
            self._persistence.save_tasks(self._tasks)
        except PersistenceError as e:
            logger.warning("Could not save %d tasks: %s", len(self._tasks), e)
            return e
        return None

    def _commit(self, action: str, task: Task) -> None:
        error = self.persist()
        self._notify(StoreChange(action, replace(task), persisted=error is None, error=error))

    # -------------------- lookup / validation --------------------
    def _index_of(self, task_id: TaskId) -> int:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        raise NotFoundError(task_id)

    def _find(self, task_id: TaskId) -> Task:
        return self._tasks[self._index_of(task_id)]

    def get(self, task_id: TaskId) -> Task:
        return replace(self._find(task_id))

    def _next_id(self) -> int:
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    @staticmethod
    def _clean_text(text: Optional[str]) -> str:
        if text is not None and not isinstance(text, str):
            raise ValidationError(f"Task description must be text, not {type(text).__name__}")
        text = (text or "").strip()
        if not text:
            raise ValidationError("Please enter a task description!")
        return text

    @staticmethod
    def _clean_category(category: Optional[str]) -> str:
        if category is not None and not isinstance(category, str):
            raise ValidationError(f"Category must be text, not {type(category).__name__}")
        return (category or "").strip()

    @staticmethod
    def _clean_priority(priority: Union[Priority, str, None]) -> Priority:
        try:
            return Priority.parse(priority)
        except ValueError:
            raise ValidationError(f"Unknown priority: {priority!r}") from None

    @staticmethod
    def _clean_due_date(due_date: Union[date, str, None]) -> Optional[date]:
        try:
            return parse_due_date(due_date)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid due date: {due_date!r}") from None

    # -------------------- task operations --------------------
    def create(self, text: str, priority: Union[Priority, str, None] = Priority.LOW,
               due_date: Union[date, str, None] = None, category: Optional[str] = "") -> Task:
        """Add a new task at the front of the collection and persist."""
        task = Task(
            id=0,
            text=self._clean_text(text),
            priority=self._clean_priority(priority),
            due_date=self._clean_due_date(due_date),
            category=self._clean_category(category),
            created_at=self._clock(),
        )
        task.id = self._next_id()
        self._tasks.insert(0, task)
        logger.debug("Task created id=%s priority=%s", task.id, task.priority.value)
        self._commit("created", task)
        return replace(task)

    def toggle(self, task_id: TaskId) -> Task:
        """Flip the completed flag of a task."""
        task = self._find(task_id)
        task.completed = not task.completed
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        self._commit("toggled", task)
        return replace(task)

    def edit(self, task_id: TaskId, text: str, priority: Union[Priority, str, None],
             due_date: Union[date, str, None], category: Optional[str]) -> Task:
        """Replace the editable fields of a task.

        Text must be non-empty after trimming, as on create; on any
        validation failure the task is left untouched.
        """
        task = self._find(task_id)
        new_text = self._clean_text(text)
        new_priority = self._clean_priority(priority)
        new_due_date = self._clean_due_date(due_date)
        new_category = self._clean_category(category)

        task.text = new_text
        task.priority = new_priority
        task.due_date = new_due_date
        task.category = new_category
        logger.debug("Task edited id=%s", task.id)
        self._commit("edited", task)
        return replace(task)

    def delete(self, task_id: TaskId) -> Task:
        """Remove a task and persist. Unknown ids raise NotFoundError."""
        task = self._tasks.pop(self._index_of(task_id))
        logger.debug("Task deleted id=%s", task.id)
        self._commit("deleted", task)
        return replace(task)

    # -------------------- view state --------------------
    def set_filter(self, value: Union[Filter, str]) -> Filter:
        try:
            new_filter = value if isinstance(value, Filter) else Filter(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown filter: {value!r}") from None
        self._filter = new_filter
        self._notify(StoreChange("filtered"))
        return new_filter

    def set_search(self, query: Optional[str]) -> str:
        if query is not None and not isinstance(query, str):
            raise ValidationError(f"Search query must be text, not {type(query).__name__}")
        self._search = (query or "").lower()
        self._notify(StoreChange("searched"))
        return self._search

    # -------------------- queries --------------------
    def query_visible(self) -> List[Task]:
        """Tasks passing the active filter and search query, in collection order."""
        visible = self._tasks
        if self._filter is Filter.COMPLETED:
            visible = [t for t in visible if t.completed]
        elif self._filter is Filter.PENDING:
            visible = [t for t in visible if not t.completed]
        if self._search:
            visible = [t for t in visible if t.matches(self._search)]
        return [replace(t) for t in visible]

    def stats(self) -> Stats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return Stats(total=total, completed=completed, pending=total - completed)

    def __str__(self) -> str:
        total, completed, pending = self.stats()
        return f"{total} tasks ({completed} done, {pending} pending)"
