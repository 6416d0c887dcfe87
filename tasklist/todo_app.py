# tasklist/todo_app.py

import sys
import logging
import datetime
from typing import List, Optional

from textual.app import App, ComposeResult
from textual.widgets import ListView, RichLog, Label, Input
from textual.containers import Container
from textual import events

from .config import Settings, configure_logging
from .data_model import Task, Filter
from .errors import TaskListError
from .persistence import JsonFileStorage, TaskPersistence
from .task_store import TaskStore, StoreChange
from .task_screen import TaskScreen, TaskScreenResult, EditSession
from .textual_widgets import TaskItem, StatsBar

FILTER_CYCLE = {
    Filter.ALL: Filter.PENDING,
    Filter.PENDING: Filter.COMPLETED,
    Filter.COMPLETED: Filter.ALL,
}

CHANGE_MESSAGES = {
    "created": ("Added", "Task added successfully!"),
    "edited": ("Edited", "Task updated successfully!"),
    "deleted": ("Deleted", "Task deleted successfully!"),
}


class TodoApp(App):
    """Main TUI Application."""
    AUTO_FOCUS = "ListView"
    CSS = """
    Screen {
        color: #00dd00;
        text-style: bold;
    }

    ListView {
        width: 100%;
        height: 1fr;
    }

    #header {
        dock: top;
        background: black;
        color: #00dd00;
        text-style: bold;
        padding: 0 1;
        width: 100%;
        height: 1;
    }

    RichLog {
        height: 8;
        display: none;
    }

    #empty-state {
        width: 100%;
        padding: 1 2;
        color: #666666;
    }
    """

    class StoreChanged(events.Message):
        """The task store changed; the list needs a refresh."""
        def __init__(self, change: StoreChange) -> None:
            super().__init__()
            self.change = change

    class MoveCursor(events.Message):
        """Message to move cursor to specific position."""
        def __init__(self, target_index: int) -> None:
            super().__init__()
            self.target_index = target_index

    def __init__(self, store: TaskStore, persistence: Optional[TaskPersistence] = None):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.persistence = persistence
        self.logs: List[str] = persistence.load_logs() if persistence else []
        self._edit_session: Optional[EditSession] = None
        self._visible: List[Task] = []
        self._unsubscribe = store.subscribe(self._on_store_change)
        self.logger.debug("TodoApp initialized with %d tasks", len(store.tasks))

        self.list_view: Optional[ListView] = None
        self.log_panel: Optional[RichLog] = None
        self.search_input: Optional[Input] = None
        self.stats_bar: Optional[StatsBar] = None
        self.empty_state: Optional[Label] = None

    def compose(self) -> ComposeResult:
        yield Label(self.header_text(), id="header")
        with Container():
            yield ListView()
            yield Label("No tasks found", id="empty-state")
        yield Input(placeholder="Search tasks... (press /)", id="search")
        yield RichLog()
        yield StatsBar()

    async def on_mount(self) -> None:
        """Called once the app is fully loaded."""
        self.list_view = self.query_one(ListView)
        self.log_panel = self.query_one(RichLog)
        self.search_input = self.query_one("#search", Input)
        self.stats_bar = self.query_one(StatsBar)
        self.empty_state = self.query_one("#empty-state", Label)
        for entry in self.logs:
            self.log_panel.write(entry)
        await self.update_list_view()
        self.list_view.focus()

    def header_text(self) -> str:
        current_date = datetime.datetime.now().strftime("%d.%m.%Y")
        return f"Task List - {self.store.filter.value} ({current_date})"

    # -------------------- rendering --------------------
    async def update_list_view(self, target_index: Optional[int] = None) -> None:
        """Rebuild the list from the store's visible tasks."""
        if self.list_view is None:
            return

        if target_index is None:
            target_index = self.get_selected_index()
        self._visible = self.store.query_visible()
        today = datetime.date.today()

        await self.list_view.clear()
        await self.list_view.extend(TaskItem(task, today) for task in self._visible)

        self.query_one("#header", Label).update(self.header_text())
        if self.stats_bar is not None:
            self.stats_bar.show_stats(self.store.stats())
        if self.empty_state is not None:
            self.empty_state.display = not self._visible

        if self._visible:
            self.post_message(self.MoveCursor(max(0, min(target_index, len(self._visible) - 1))))

    def get_selected_index(self) -> int:
        """Return the currently selected task index or -1 if none."""
        if self.list_view is None or self.list_view.index is None:
            return -1
        return self.list_view.index

    def get_selected_task(self) -> Optional[Task]:
        idx = self.get_selected_index()
        if 0 <= idx < len(self._visible):
            return self._visible[idx]
        return None

    async def on_todo_app_move_cursor(self, message: MoveCursor) -> None:
        if self.list_view and self.list_view.children:
            self.list_view.index = message.target_index

    # -------------------- store notifications --------------------
    def _on_store_change(self, change: StoreChange) -> None:
        self.post_message(self.StoreChanged(change))

    async def on_todo_app_store_changed(self, message: StoreChanged) -> None:
        change = message.change
        target_index = 0 if change.action == "created" else None
        await self.update_list_view(target_index)

        if change.task is not None:
            if change.action == "toggled":
                verb = "Completed" if change.task.completed else "Reopened"
            else:
                verb = CHANGE_MESSAGES[change.action][0]
            self.add_log_entry(f"{verb} task: '{change.task.text}'")

        if change.persisted is False:
            self.notify(f"Changes were not saved: {change.error}",
                        title="Storage", severity="warning")
        elif change.action in CHANGE_MESSAGES:
            self.notify(CHANGE_MESSAGES[change.action][1])

    def add_log_entry(self, message: str):
        """Add a log entry to logs list and to the log panel."""
        if self.persistence is not None:
            try:
                entry = self.persistence.log_action(self.logs, message)
            except TaskListError as e:
                self.logger.warning("Could not save activity log: %s", e)
                entry = self.logs[-1]
        else:
            entry = f"[{datetime.datetime.now():%Y-%m-%d %H:%M:%S}] {message}"
            self.logs.append(entry)
        if self.log_panel:
            self.log_panel.write(entry)

    def run_store_action(self, action, *args) -> Optional[Task]:
        """Call a store operation, turning expected failures into a toast."""
        try:
            return action(*args)
        except TaskListError as e:
            self.logger.debug("Store rejected %s: %s", action.__name__, e)
            self.notify(str(e), severity="error")
            return None

    # -------------------- keys --------------------
    async def on_key(self, event: events.Key) -> None:
        """Handle key events for the main application."""
        if self._edit_session is not None:
            return

        if self.focused is self.search_input:
            if event.key in ("escape", "enter", "down") and self.list_view is not None:
                self.list_view.focus()
            return

        if event.key == "a":
            await self.open_task_screen()
        elif event.key in ("e", "enter"):
            task = self.get_selected_task()
            if task is not None:
                await self.open_task_screen(task)
        elif event.key in ("space", "r"):
            task = self.get_selected_task()
            if task is not None:
                self.run_store_action(self.store.toggle, task.id)
        elif event.key == "d":
            task = self.get_selected_task()
            if task is not None:
                self.run_store_action(self.store.delete, task.id)
        elif event.key == "f":
            self.store.set_filter(FILTER_CYCLE[self.store.filter])
        elif event.key == "slash":
            if self.search_input is not None:
                self.search_input.focus()
        elif event.key == "j":
            if self.list_view is not None:
                self.list_view.action_cursor_down()
        elif event.key == "k":
            if self.list_view is not None:
                self.list_view.action_cursor_up()
        elif event.key == "L":
            self.action_toggle_log()
        elif event.key in ("q", "escape"):
            self.exit()

    def action_toggle_log(self):
        """Toggle the log panel (L)."""
        if self.log_panel:
            self.log_panel.display = not self.log_panel.display

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is self.search_input:
            self.store.set_search(event.value)

    # -------------------- add / edit --------------------
    async def open_task_screen(self, task: Optional[Task] = None):
        """Open the task screen for adding or editing a task."""
        self._edit_session = EditSession(task.id if task else None)
        await self.push_screen(TaskScreen(task))

    async def on_task_screen_result(self, message: TaskScreenResult) -> None:
        """Apply the form values to the store and end the edit session."""
        session, self._edit_session = self._edit_session, None
        if message.cancelled or session is None:
            return

        if session.is_new:
            self.run_store_action(self.store.create, message.text, message.priority,
                                  message.due_date, message.category)
        else:
            self.run_store_action(self.store.edit, session.task_id, message.text,
                                  message.priority, message.due_date, message.category)

        if self.list_view is not None:
            self.list_view.focus()

    def on_unmount(self) -> None:
        """Called before the app closes; ensure logs are saved."""
        self._unsubscribe()
        if self.persistence is not None:
            try:
                self.persistence.save_logs(self.logs)
            except TaskListError as e:
                self.logger.warning("Could not save activity log: %s", e)


def main(argv: Optional[List[str]] = None) -> None:
    settings = Settings.from_env(sys.argv[1:] if argv is None else argv)
    configure_logging(settings)

    persistence = TaskPersistence(JsonFileStorage(settings.data_file), max_logs=settings.max_logs)
    store = TaskStore(persistence)
    store.load()

    app = TodoApp(store, persistence)
    app.run()


if __name__ == "__main__":
    main()
