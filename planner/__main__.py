"""
Summary:
Entrypoint so you can run:
  python -m planner --port 7540 --db-file ./scheduler.db
Flags override the TODO_* environment variables.
"""

from __future__ import annotations

import argparse
import os

import uvicorn

from planner.config import get_settings
from planner.db import init_db


def main() -> None:
    parser = argparse.ArgumentParser(prog="planner", description="Recurring task scheduler (HTTP + sqlite).")
    parser.add_argument("--host", type=str, default=None, help="Bind address (overrides TODO_HOST).")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (overrides TODO_PORT).")
    parser.add_argument("--db-file", type=str, default=None, help="sqlite file (overrides TODO_DBFILE).")
    parser.add_argument("--web-dir", type=str, default=None, help="Static UI directory (overrides TODO_WEBDIR).")
    args = parser.parse_args()

    for name, value in (
        ("TODO_HOST", args.host),
        ("TODO_PORT", args.port),
        ("TODO_DBFILE", args.db_file),
        ("TODO_WEBDIR", args.web_dir),
    ):
        if value is not None:
            os.environ[name] = str(value)

    settings = get_settings()
    db_path = init_db()
    print(f"[server] Starting on {settings.host}:{settings.port}, db: {db_path}, web: {settings.web_path}")
    uvicorn.run("planner.web:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
