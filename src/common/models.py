from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
STATUS_ALL = "All"

TASK_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)
FILTER_STATUSES = (STATUS_ALL, *TASK_STATUSES)

TaskId = Union[int, str]


class EditValidationError(ValueError):
    """A structured edit request was rejected before any request was sent."""


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[TaskId] = None
    name: str = ""
    email: str = ""


class Task(BaseModel):
    """
    Snapshot of a server-owned task as returned by the list endpoint.

    `status` is kept as the raw server string; unknown values are rendered
    with the completed badge rather than rejected here.
    """

    model_config = ConfigDict(extra="allow")

    id: TaskId
    title: str = ""
    description: str = ""
    status: str = STATUS_PENDING


def _trim(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


class TaskDraft(BaseModel):
    """Fields collected by the add-task form; trimmed, otherwise unvalidated."""

    title: str = ""
    description: str = ""
    status: str = STATUS_PENDING

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _trim(v)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class TaskEdit(BaseModel):
    """
    Full replacement of a task's editable fields, collected in one submission.

    All three fields are required and must be non-empty after trimming;
    `status` must be one of TASK_STATUSES.
    """

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    status: str

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _trim(v)

    @field_validator("status")
    @classmethod
    def known_status(cls, v: str) -> str:
        if v not in TASK_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(TASK_STATUSES)}")
        return v

    @classmethod
    def parse(cls, title: Any, description: Any, status: Any) -> "TaskEdit":
        """Build an edit request, raising EditValidationError on bad input."""
        try:
            return cls(title=title, description=description, status=status)
        except ValidationError as ve:
            fields = sorted({str(err["loc"][0]) for err in ve.errors() if err.get("loc")})
            raise EditValidationError(f"Invalid edit: {', '.join(fields) or 'input'}") from ve

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class TaskFilter(BaseModel):
    status: str = STATUS_ALL
    search: str = ""

    @field_validator("search", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _trim(v)


__all__ = [
    "EditValidationError",
    "FILTER_STATUSES",
    "STATUS_ALL",
    "STATUS_COMPLETED",
    "STATUS_IN_PROGRESS",
    "STATUS_PENDING",
    "TASK_STATUSES",
    "Task",
    "TaskDraft",
    "TaskEdit",
    "TaskFilter",
    "TaskId",
    "User",
]
