from .config import TASKS_LIMIT
from .db import get_conn

_COLUMNS = "id, date, title, comment, repeat"


def _to_dict(row) -> dict:
    task = dict(row)
    task["id"] = str(task["id"])
    return task


def add_task(date: str, title: str, comment: str, repeat: str) -> int:
    with get_conn() as conn:
        cur = conn.execute(
            "INSERT INTO scheduler (date, title, comment, repeat) VALUES (?, ?, ?, ?)",
            (date, title, comment or "", repeat or ""),
        )
        conn.commit()
        return int(cur.lastrowid)


def get_task(task_id: int) -> dict | None:
    with get_conn() as conn:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM scheduler WHERE id = ?",
            (task_id,),
        ).fetchone()
        return _to_dict(row) if row else None


def list_tasks(limit: int = TASKS_LIMIT) -> list[dict]:
    with get_conn() as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM scheduler ORDER BY date, id LIMIT ?",
            (limit,),
        ).fetchall()
        return [_to_dict(r) for r in rows]


def list_tasks_on(date: str, limit: int = TASKS_LIMIT) -> list[dict]:
    with get_conn() as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM scheduler WHERE date = ? ORDER BY id LIMIT ?",
            (date, limit),
        ).fetchall()
        return [_to_dict(r) for r in rows]


def find_by_text(fragment: str, limit: int = TASKS_LIMIT) -> list[dict]:
    like = f"%{fragment}%"
    with get_conn() as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM scheduler "
            "WHERE title LIKE ? OR comment LIKE ? "
            "ORDER BY date, id LIMIT ?",
            (like, like, limit),
        ).fetchall()
        return [_to_dict(r) for r in rows]


def update_task(task_id: int, date: str, title: str, comment: str, repeat: str) -> bool:
    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE scheduler SET date = ?, title = ?, comment = ?, repeat = ? WHERE id = ?",
            (date, title, comment or "", repeat or "", task_id),
        )
        conn.commit()
        return cur.rowcount > 0


def set_task_date(task_id: int, date: str) -> bool:
    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE scheduler SET date = ? WHERE id = ?",
            (date, task_id),
        )
        conn.commit()
        return cur.rowcount > 0


def delete_task(task_id: int) -> bool:
    with get_conn() as conn:
        cur = conn.execute(
            "DELETE FROM scheduler WHERE id = ?",
            (task_id,),
        )
        conn.commit()
        return cur.rowcount > 0
