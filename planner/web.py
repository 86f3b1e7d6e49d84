"""
Summary:
FastAPI app for the scheduler:
- /api/task, /api/tasks, /api/task/done  task CRUD as JSON
- /api/nextdate                          recurrence engine as plain text
- /                                      static web UI, when the web directory exists
"""

from __future__ import annotations

import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from planner import service
from planner.config import get_settings
from planner.db import init_db
from planner.models import CreatedTask, Task, TaskList
from planner.service import TaskError


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(lifespan=lifespan)


@app.exception_handler(TaskError)
async def _task_error(request: Request, exc: TaskError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(str(err.get("msg", "")) for err in exc.errors())
    return JSONResponse({"error": f"deserialization error: {details}"}, status_code=400)


@app.exception_handler(Exception)
async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    traceback.print_exc()
    return JSONResponse({"error": f"{type(exc).__name__}: {exc}"}, status_code=500)


@app.get("/api/nextdate", response_class=PlainTextResponse)
def api_next_date(now: str = "", date: str = "", repeat: str = "") -> PlainTextResponse:
    try:
        return PlainTextResponse(service.api_next_date(now, date, repeat))
    except TaskError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)


@app.post("/api/task")
def api_add_task(task: Task) -> CreatedTask:
    return CreatedTask(id=service.add_task(task))


@app.get("/api/task")
def api_get_task(id: str = "") -> Task:
    return service.get_task(id)


@app.put("/api/task")
def api_update_task(task: Task) -> dict:
    service.update_task(task)
    return {}


@app.delete("/api/task")
def api_delete_task(id: str = "") -> dict:
    service.delete_task(id)
    return {}


@app.post("/api/task/done")
def api_done_task(id: str = "") -> dict:
    service.done_task(id)
    return {}


@app.get("/api/tasks")
def api_tasks(search: str = "") -> TaskList:
    return TaskList(tasks=service.list_tasks(search))


# Mounted last so it does not shadow the API routes.
_web_dir = get_settings().web_path
if _web_dir.is_dir():
    app.mount("/", StaticFiles(directory=_web_dir, html=True), name="web")
