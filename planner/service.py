"""
Summary:
Task API rules on top of the task store and the recurrence engine.

Every user-facing failure is raised as TaskError(message, status_code); the web
layer turns it into a JSON error body. `now` defaults to today's date and can be
passed in to pin the calendar.
"""

from __future__ import annotations

from datetime import date, datetime

from planner import tasks
from planner.config import SEARCH_DATE_FORMAT
from planner.models import Task
from planner.recurrence import RecurrenceError, format_date, next_date, parse_date


class TaskError(Exception):
    """Summary: A request the task API refuses; carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _parse_id(raw: str | None) -> int:
    raw = (raw or "").strip()
    if not raw:
        raise TaskError("empty id")
    try:
        return int(raw)
    except ValueError:
        raise TaskError(f"invalid id format: {raw!r}") from None


def _next(now: date, date_text: str, repeat: str) -> str:
    try:
        return next_date(now, date_text, repeat)
    except RecurrenceError as e:
        raise TaskError(f"can't find next date: {e}") from e


def _schedule_date(task: Task, now: date) -> str:
    """
    Summary:
    Date a created or edited task is stored with. Empty means today; a past date
    moves to today (one-off task) or to the rule's next occurrence after today.
    """
    if not task.title.strip():
        raise TaskError("empty title")

    if not task.date:
        task_date = now
    else:
        try:
            task_date = parse_date(task.date)
        except RecurrenceError as e:
            raise TaskError(f"invalid date format: {e}") from e

    upcoming = _next(now, format_date(task_date), task.repeat) if task.repeat else ""

    if task_date < now:
        return upcoming or format_date(now)
    return format_date(task_date)


def add_task(task: Task, now: date | None = None) -> int:
    now = now or date.today()
    task_date = _schedule_date(task, now)
    return tasks.add_task(task_date, task.title, task.comment, task.repeat)


def get_task(raw_id: str | None) -> Task:
    row = tasks.get_task(_parse_id(raw_id))
    if row is None:
        raise TaskError("task not found", 404)
    return Task(**row)


def list_tasks(search: str | None = None) -> list[Task]:
    search = (search or "").strip()
    if not search:
        rows = tasks.list_tasks()
    else:
        try:
            on_date = datetime.strptime(search, SEARCH_DATE_FORMAT).date()
        except ValueError:
            rows = tasks.find_by_text(search)
        else:
            rows = tasks.list_tasks_on(format_date(on_date))
    return [Task(**r) for r in rows]


def update_task(task: Task, now: date | None = None) -> None:
    now = now or date.today()
    task_id = _parse_id(task.id)
    task_date = _schedule_date(task, now)
    if not tasks.update_task(task_id, task_date, task.title, task.comment, task.repeat):
        raise TaskError("task not found", 404)


def delete_task(raw_id: str | None) -> None:
    if not tasks.delete_task(_parse_id(raw_id)):
        raise TaskError("task not found", 404)


def done_task(raw_id: str | None, now: date | None = None) -> None:
    """
    Summary:
    One-off tasks are deleted; recurring tasks move to their next occurrence.
    """
    now = now or date.today()
    task_id = _parse_id(raw_id)
    row = tasks.get_task(task_id)
    if row is None:
        raise TaskError("task not found", 404)

    if not row["repeat"]:
        tasks.delete_task(task_id)
        return

    if not row["date"]:
        raise TaskError("empty date")
    tasks.set_task_date(task_id, _next(now, row["date"], row["repeat"]))


def api_next_date(now_text: str | None, date_text: str | None, repeat: str | None) -> str:
    if not now_text or not date_text or not repeat:
        raise TaskError("missing required query parameters: now, date, repeat")
    try:
        now = parse_date(now_text)
    except RecurrenceError as e:
        raise TaskError(f"invalid 'now' parameter: {e}") from e
    try:
        return next_date(now, date_text, repeat)
    except RecurrenceError as e:
        raise TaskError(f"error calculating next date: {e}") from e
