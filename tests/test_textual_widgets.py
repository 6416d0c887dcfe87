# tests/test_textual_widgets.py

from __future__ import annotations

from datetime import date, datetime, timezone

from tasklist.data_model import Priority, Task
from tasklist.task_store import Stats
from tasklist.textual_widgets import StatsBar, TaskItem


def test_task_item_summary_shows_tags_and_overdue() -> None:
    task = Task(
        id=1,
        text="Call client",
        priority=Priority.HIGH,
        due_date=date(2024, 5, 3),
        category="work",
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )
    item = TaskItem(task, today=date(2024, 5, 10))

    assert item.render_text() == (
        "○ Call client #work (HIGH) due 2024-05-03 OVERDUE · created 2024-05-01"
    )
    assert item.has_class("-overdue")
    assert item.has_class("-priority-high")
    assert not item.has_class("-completed")
    assert item.task is task


def test_completed_task_item() -> None:
    task = Task(id=2, text="Pay bills", completed=True, due_date=date(2024, 5, 3),
                created_at=datetime(2024, 5, 1, tzinfo=timezone.utc))
    item = TaskItem(task, today=date(2024, 5, 10))

    assert item.render_text().startswith("✓ Pay bills (low) due 2024-05-03 ·")
    assert item.has_class("-completed")
    assert not item.has_class("-overdue")


def test_stats_text() -> None:
    assert StatsBar.format_stats(Stats(3, 1, 2)) == "3 tasks (1 done, 2 pending)"
