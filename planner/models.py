from __future__ import annotations

from pydantic import BaseModel, field_validator


class Task(BaseModel):
    """
    Summary:
    A scheduler row as it travels over HTTP. Every field is text; `date` is
    YYYYMMDD and `repeat` is rule text (empty for one-off tasks).
    """
    id: str = ""
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        # clients send the id either as "12" or 12
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TaskList(BaseModel):
    tasks: list[Task]


class CreatedTask(BaseModel):
    id: int
