import sqlite3
from pathlib import Path

from planner.config import get_settings


def get_conn() -> sqlite3.Connection:
    db_path = get_settings().db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> Path:
    db_path = get_settings().db_path
    if not db_path.exists():
        print(f"[db] Database {db_path} doesn't exist, creating ...")

    with get_conn() as conn:
        conn.executescript("""
        CREATE TABLE IF NOT EXISTS scheduler (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date CHAR(8) NOT NULL DEFAULT '',
            title VARCHAR(256) NOT NULL DEFAULT '',
            comment TEXT NOT NULL DEFAULT '',
            repeat VARCHAR(128) NOT NULL DEFAULT ''
        );
        CREATE INDEX IF NOT EXISTS scheduler_date ON scheduler (date);
        """)
        conn.commit()
    return db_path
