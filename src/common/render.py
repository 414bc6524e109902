from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .models import STATUS_IN_PROGRESS, STATUS_PENDING, Task, TaskId


EMPTY_PLACEHOLDER = "No tasks found."

ACTION_EDIT = "edit"
ACTION_DELETE = "delete"


def status_class(status: str) -> str:
    """Badge class for a task status. Total: anything unrecognized is "completed"."""
    if status == STATUS_PENDING:
        return "pending"
    if status == STATUS_IN_PROGRESS:
        return "progress"
    return "completed"


@dataclass(frozen=True)
class ActionBinding:
    """A per-item trigger, resolved through an EventRouter rather than by name lookup."""

    action: str
    task_id: TaskId
    label: str


@dataclass(frozen=True)
class TaskItemView:
    task_id: TaskId
    title: str
    description: str
    status: str
    badge_class: str
    actions: Tuple[ActionBinding, ...]

    def binding(self, action: str) -> Optional[ActionBinding]:
        for b in self.actions:
            if b.action == action:
                return b
        return None


@dataclass(frozen=True)
class TaskListView:
    """
    Declarative description of the rendered task list.

    Either `items` is non-empty, or `placeholder` carries the empty-state text
    and there are no action bindings at all.
    """

    items: Tuple[TaskItemView, ...] = ()
    placeholder: Optional[str] = EMPTY_PLACEHOLDER

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def bindings(self) -> Tuple[ActionBinding, ...]:
        return tuple(b for item in self.items for b in item.actions)

    def find(self, task_id: TaskId) -> Optional[TaskItemView]:
        # Ids typed at a prompt arrive as strings; compare loosely
        for item in self.items:
            if item.task_id == task_id or str(item.task_id) == str(task_id):
                return item
        return None


def _item_view(task: Task) -> TaskItemView:
    return TaskItemView(
        task_id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        badge_class=status_class(task.status),
        actions=(
            ActionBinding(action=ACTION_EDIT, task_id=task.id, label="Edit"),
            ActionBinding(action=ACTION_DELETE, task_id=task.id, label="Delete"),
        ),
    )


def render_task_list(tasks: Optional[Iterable[Task]]) -> TaskListView:
    """Build the list view for `tasks` in the order given. Pure; no state kept."""
    items = tuple(_item_view(t) for t in (tasks or ()))
    if not items:
        return TaskListView(items=(), placeholder=EMPTY_PLACEHOLDER)
    return TaskListView(items=items, placeholder=None)


def format_task_list(view: TaskListView) -> str:
    """Plain-text rendering of a list view for the console shell."""
    if view.is_empty:
        return f"  {view.placeholder or EMPTY_PLACEHOLDER}"

    blocks: list[str] = []
    for item in view.items:
        lines = [f"#{item.task_id}  {item.title}  [{item.badge_class}] {item.status}"]
        if item.description:
            lines.append(f"    {item.description}")
        actions = " / ".join(f"{b.label.lower()} {item.task_id}" for b in item.actions)
        lines.append(f"    ({actions})")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


__all__ = [
    "ACTION_DELETE",
    "ACTION_EDIT",
    "ActionBinding",
    "EMPTY_PLACEHOLDER",
    "TaskItemView",
    "TaskListView",
    "format_task_list",
    "render_task_list",
    "status_class",
]
