"""Tests for the task API rules and the sqlite task store."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from planner import service, tasks
from planner.models import Task
from planner.service import TaskError


def _stored_date(task_id: int) -> str:
    return tasks.get_task(task_id)["date"]


class TestAddTask:
    def test_empty_date_means_today(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Water plants"), now=now)
        assert _stored_date(task_id) == "20240301"

    def test_past_one_off_moves_to_today(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Call mom", date="20240101"), now=now)
        assert _stored_date(task_id) == "20240301"

    def test_past_recurring_moves_to_next_occurrence(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Gym", date="20240131", repeat="d 7"), now=now)
        assert _stored_date(task_id) == "20240306"

    def test_future_date_is_kept(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Gym", date="20240310", repeat="d 7"), now=now)
        assert _stored_date(task_id) == "20240310"

    def test_today_is_kept(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Gym", date="20240301", repeat="d 7"), now=now)
        assert _stored_date(task_id) == "20240301"

    def test_invalid_rule_is_rejected_even_for_future_dates(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.add_task(Task(title="Gym", date="20240310", repeat="d 401"), now=now)
        assert exc_info.value.status_code == 400

    def test_empty_title(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.add_task(Task(title="  ", date="20240310"), now=now)
        assert exc_info.value.status_code == 400
        assert "title" in exc_info.value.message

    def test_invalid_date(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.add_task(Task(title="x", date="2024-03-10"), now=now)
        assert exc_info.value.status_code == 400

    def test_fields_are_stored(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Report", date="20240305", comment="Q1", repeat="m 5"), now=now)
        assert service.get_task(str(task_id)) == Task(
            id=str(task_id), date="20240305", title="Report", comment="Q1", repeat="m 5"
        )


class TestGetAndDelete:
    def test_missing_task(self, db_file: Path) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.get_task("999")
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("raw_id", ["", None, "abc", "1.5"])
    def test_bad_id(self, db_file: Path, raw_id: str | None) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.get_task(raw_id)
        assert exc_info.value.status_code == 400

    def test_delete(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x"), now=now)
        service.delete_task(str(task_id))
        assert tasks.get_task(task_id) is None

    def test_delete_missing(self, db_file: Path) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.delete_task("42")
        assert exc_info.value.status_code == 404


class TestUpdateTask:
    def test_updates_all_fields(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="Old", date="20240310"), now=now)
        service.update_task(
            Task(id=str(task_id), title="New", date="20240320", comment="c", repeat="w 1"), now=now
        )
        assert service.get_task(str(task_id)) == Task(
            id=str(task_id), date="20240320", title="New", comment="c", repeat="w 1"
        )

    def test_past_recurring_date_is_advanced(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x"), now=now)
        service.update_task(Task(id=str(task_id), title="x", date="20240115", repeat="m -1"), now=now)
        assert _stored_date(task_id) == "20240331"

    def test_missing_task(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.update_task(Task(id="999", title="x"), now=now)
        assert exc_info.value.status_code == 404

    def test_empty_id(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.update_task(Task(title="x"), now=now)
        assert exc_info.value.status_code == 400

    def test_invalid_rule(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x"), now=now)
        with pytest.raises(TaskError) as exc_info:
            service.update_task(Task(id=str(task_id), title="x", repeat="q 1"), now=now)
        assert exc_info.value.status_code == 400
        assert _stored_date(task_id) == "20240301"


class TestDoneTask:
    def test_one_off_task_is_deleted(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x"), now=now)
        service.done_task(str(task_id), now=now)
        assert tasks.get_task(task_id) is None

    def test_recurring_task_moves_forward(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x", repeat="d 3"), now=now)
        service.done_task(str(task_id), now=now)
        assert _stored_date(task_id) == "20240304"

    def test_only_the_completed_task_moves(self, db_file: Path, now: date) -> None:
        done_id = service.add_task(Task(title="a", repeat="d 1"), now=now)
        other_id = service.add_task(Task(title="b", repeat="d 1"), now=now)
        service.done_task(str(done_id), now=now)
        assert _stored_date(done_id) == "20240302"
        assert _stored_date(other_id) == "20240301"

    def test_weekly_task_counts_from_today(self, db_file: Path, now: date) -> None:
        task_id = service.add_task(Task(title="x", date="20240320", repeat="w 1"), now=now)
        service.done_task(str(task_id), now=now)
        assert _stored_date(task_id) == "20240304"

    def test_missing_task(self, db_file: Path, now: date) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.done_task("7", now=now)
        assert exc_info.value.status_code == 404

    def test_empty_stored_date(self, db_file: Path, now: date) -> None:
        task_id = tasks.add_task("", "x", "", "d 1")
        with pytest.raises(TaskError) as exc_info:
            service.done_task(str(task_id), now=now)
        assert exc_info.value.status_code == 400

    def test_broken_stored_rule(self, db_file: Path, now: date) -> None:
        task_id = tasks.add_task("20240301", "x", "", "every day")
        with pytest.raises(TaskError) as exc_info:
            service.done_task(str(task_id), now=now)
        assert exc_info.value.status_code == 400


class TestListTasks:
    def test_empty(self, db_file: Path) -> None:
        assert service.list_tasks() == []

    def test_ordered_by_date(self, db_file: Path, now: date) -> None:
        service.add_task(Task(title="late", date="20240320"), now=now)
        service.add_task(Task(title="early", date="20240305"), now=now)
        assert [t.title for t in service.list_tasks()] == ["early", "late"]

    def test_limit(self, db_file: Path, now: date) -> None:
        for i in range(60):
            tasks.add_task("20240301", f"task {i}", "", "")
        assert len(service.list_tasks()) == 50

    def test_search_by_text(self, db_file: Path, now: date) -> None:
        service.add_task(Task(title="Buy milk"), now=now)
        service.add_task(Task(title="Gym", comment="legs, then milk shake"), now=now)
        service.add_task(Task(title="Read"), now=now)
        assert {t.title for t in service.list_tasks("milk")} == {"Buy milk", "Gym"}

    def test_search_by_date(self, db_file: Path, now: date) -> None:
        service.add_task(Task(title="a", date="20240306"), now=now)
        service.add_task(Task(title="b", date="20240307"), now=now)
        assert [t.title for t in service.list_tasks("06.03.2024")] == ["a"]


class TestApiNextDate:
    def test_ok(self) -> None:
        assert service.api_next_date("20240301", "20240131", "d 7") == "20240306"

    @pytest.mark.parametrize(
        ("now_text", "date_text", "repeat"),
        [
            ("", "20240131", "d 7"),
            ("20240301", "", "d 7"),
            ("20240301", "20240131", ""),
            ("01.03.2024", "20240131", "d 7"),
            ("20240301", "20240131", "d 0"),
        ],
    )
    def test_bad_input(self, now_text: str, date_text: str, repeat: str) -> None:
        with pytest.raises(TaskError) as exc_info:
            service.api_next_date(now_text, date_text, repeat)
        assert exc_info.value.status_code == 400
