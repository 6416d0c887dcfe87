# tasklist/task_screen.py

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Label, Input, Select
from textual import events

from .data_model import Task, Priority, parse_due_date
from .errors import TaskId


@dataclass
class EditSession:
    """The add/edit workflow in progress. `task_id` is None when adding."""
    task_id: Optional[TaskId] = None

    @property
    def is_new(self) -> bool:
        return self.task_id is None


class TaskScreenResult(events.Message):
    """Message containing the result of TaskScreen operations."""
    def __init__(self, cancelled: bool, text: str = "", priority: Priority = Priority.LOW,
                 due_date: Optional[date] = None, category: str = "") -> None:
        super().__init__()
        self.cancelled = cancelled
        self.text = text
        self.priority = priority
        self.due_date = due_date
        self.category = category


PRIORITY_OPTIONS = [(p.value.capitalize(), p) for p in Priority]


class TaskScreen(Screen):
    """Screen for adding or editing tasks."""

    CSS = """
    TaskScreen {
        padding: 1 2;
    }

    #form-error {
        color: #dd0000;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "submit", "Save task"),
    ]

    def __init__(self, task: Optional[Task] = None):
        super().__init__()
        self._task_item = task

        self.text_input = Input(placeholder="Task description (required)", select_on_focus=False)
        self.priority_select = Select(PRIORITY_OPTIONS, allow_blank=False,
                                      value=task.priority if task else Priority.LOW)
        self.due_input = Input(placeholder="Due date YYYY-MM-DD (optional)", select_on_focus=False)
        self.category_input = Input(placeholder="Category (optional)", select_on_focus=False)
        self.error_label = Label("", id="form-error")

        if task:
            self.text_input.value = task.text
            self.due_input.value = task.due_date.isoformat() if task.due_date else ""
            self.category_input.value = task.category

        self.logger = logging.getLogger(__name__)

    def on_mount(self):
        """Called once the screen is mounted."""
        self.text_input.focus()

    def compose(self) -> ComposeResult:
        yield Label("Edit Task" if self._task_item else "New Task")
        yield Label("Description:")
        yield self.text_input
        yield Label("Priority:")
        yield self.priority_select
        yield Label("Due date:")
        yield self.due_input
        yield Label("Category:")
        yield self.category_input
        yield self.error_label

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_submit()

    def action_submit(self) -> None:
        """Validate the form and hand the values to the app."""
        text = self.text_input.value.strip()
        if not text:
            self.logger.debug("Description is required, submission aborted")
            self.error_label.update("Please enter a task description!")
            return

        try:
            due_date = parse_due_date(self.due_input.value)
        except ValueError:
            self.error_label.update("Due date must look like YYYY-MM-DD")
            return

        self.app.post_message(TaskScreenResult(
            cancelled=False,
            text=text,
            priority=self.priority_select.value,
            due_date=due_date,
            category=self.category_input.value.strip(),
        ))
        self.app.pop_screen()

    def action_cancel(self) -> None:
        """Handle Escape key for canceling task add/edit."""
        self.logger.debug("Cancel action triggered")
        self.app.post_message(TaskScreenResult(cancelled=True))
        self.app.pop_screen()
