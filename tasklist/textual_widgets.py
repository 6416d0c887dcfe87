# tasklist/textual_widgets.py

from datetime import date
from typing import Optional

from textual.widgets import ListItem, Label

from .data_model import Task, Priority
from .task_store import Stats

PRIORITY_MARKERS = {
    Priority.LOW: "low",
    Priority.MEDIUM: "MED",
    Priority.HIGH: "HIGH",
}


class TaskItem(ListItem):
    """A ListItem representing a single task row in the ListView."""

    DEFAULT_CSS = """
    TaskItem {
        color: #00dd00;
        text-style: bold;
    }

    TaskItem > Label {
        color: #00dd00;
        text-style: bold;
    }

    TaskItem.-priority-high > Label {
        color: #ffaa00;
    }

    TaskItem.-overdue > Label {
        color: #dd0000;
    }

    TaskItem.-completed,
    TaskItem.-completed > Label {
        color: #666666;
        text-style: strike;
    }
    """

    def __init__(self, task: Task, today: Optional[date] = None):
        self._task_item = task
        self._today = today
        self._label = Label(self.render_text(), markup=False)
        super().__init__(self._label)
        self._update_classes()

    def render_text(self) -> str:
        """Return a one-line summary: mark, text, tags, due and created dates."""
        task = self._task_item
        parts = ["✓" if task.completed else "○", task.text]
        if task.category:
            parts.append(f"#{task.category}")
        parts.append(f"({PRIORITY_MARKERS[task.priority]})")
        if task.due_date:
            parts.append(f"due {task.due_date.isoformat()}")
        if task.is_overdue(self._today):
            parts.append("OVERDUE")
        parts.append(f"· created {task.created_at.date().isoformat()}")
        return " ".join(parts)

    @property
    def task(self) -> Task:
        return self._task_item

    def _update_classes(self) -> None:
        self.set_class(self._task_item.completed, "-completed")
        self.set_class(self._task_item.priority is Priority.HIGH, "-priority-high")
        self.set_class(self._task_item.is_overdue(self._today), "-overdue")


class StatsBar(Label):
    """Task counters shown under the list."""

    DEFAULT_CSS = """
    StatsBar {
        dock: bottom;
        background: black;
        color: #00dd00;
        width: 100%;
        padding: 0 1;
    }
    """

    @staticmethod
    def format_stats(stats: Stats) -> str:
        return f"{stats.total} tasks ({stats.completed} done, {stats.pending} pending)"

    def show_stats(self, stats: Stats) -> None:
        self.update(self.format_stats(stats))
