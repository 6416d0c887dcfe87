# tests/test_data_model.py

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from tasklist.data_model import Priority, Task, parse_due_date


def test_to_dict_uses_stored_field_names() -> None:
    task = Task(
        id=1714555800000,
        text="Call client",
        priority=Priority.HIGH,
        due_date=date(2024, 5, 3),
        category="work",
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )

    assert task.to_dict() == {
        "id": 1714555800000,
        "text": "Call client",
        "completed": False,
        "priority": "high",
        "dueDate": "2024-05-03",
        "category": "work",
        "createdAt": "2024-05-01T09:30:00+00:00",
    }


def test_from_dict_reads_browser_style_record() -> None:
    task = Task.from_dict({
        "id": 1700000000000,
        "text": "Buy milk",
        "completed": True,
        "priority": "medium",
        "dueDate": "",
        "category": "",
        "createdAt": "2023-11-14T22:13:20.000Z",
    })

    assert task.id == 1700000000000
    assert task.completed is True
    assert task.priority is Priority.MEDIUM
    assert task.due_date is None
    assert task.category == ""
    assert task.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def test_from_dict_defaults_unknown_priority_to_low() -> None:
    task = Task.from_dict({"id": "a1", "text": "x", "priority": "urgent"})
    assert task.priority is Priority.LOW
    assert task.id == "a1"


@pytest.mark.parametrize(
    "record",
    [
        {"text": "no id"},
        {"id": 1},
        {"id": 1, "text": 42},
        {"id": None, "text": "x"},
        {"id": 1, "text": "x", "completed": "yes"},
        {"id": 1, "text": "x", "dueDate": "next week"},
    ],
)
def test_from_dict_rejects_malformed_records(record: dict) -> None:
    with pytest.raises((KeyError, TypeError, ValueError)):
        Task.from_dict(record)


def test_parse_due_date_accepts_blank_and_iso() -> None:
    assert parse_due_date(None) is None
    assert parse_due_date("  ") is None
    assert parse_due_date("2024-02-29") == date(2024, 2, 29)
    assert parse_due_date(date(2024, 1, 1)) == date(2024, 1, 1)


def test_is_overdue_only_for_pending_tasks_past_due() -> None:
    today = date(2024, 5, 10)
    late = Task(id=1, text="late", due_date=date(2024, 5, 9))
    done = Task(id=2, text="done", due_date=date(2024, 5, 9), completed=True)
    due_today = Task(id=3, text="today", due_date=today)
    undated = Task(id=4, text="whenever")

    assert late.is_overdue(today)
    assert not done.is_overdue(today)
    assert not due_today.is_overdue(today)
    assert not undated.is_overdue(today)


def test_matches_text_or_category_case_insensitively() -> None:
    task = Task(id=1, text="Call client", category="Work")

    assert task.matches("")
    assert task.matches("CLIENT")
    assert task.matches("work")
    assert not task.matches("home")
    assert not Task(id=2, text="Pay bills").matches("work")
