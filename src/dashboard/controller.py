from __future__ import annotations

import logging
import time
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from common.events import EventRouter
from common.messages import Clock, MessageSlot, StatusMessage, failure, server_text
from common.models import (
    EditValidationError,
    STATUS_ALL,
    Task,
    TaskDraft,
    TaskEdit,
    TaskFilter,
    TaskId,
)
from common.render import ACTION_DELETE, ACTION_EDIT, TaskListView, render_task_list
from common.tasks_api import Payload, TaskApiClient, TaskApiNetworkError
from state.session_store import SessionContext


logger = logging.getLogger(__name__)

TASK_ADDED = "Task added!"
TASK_CREATE_FAILED = "Task create failed"
TASK_LOAD_FAILED = "Could not load tasks"
NETWORK_FAILED = "Could not reach the task service"
DEFAULT_FLASH_SECONDS = 1.2


def _parse_tasks(data: Payload) -> List[Task]:
    tasks: List[Task] = []
    for raw in data or ():
        try:
            tasks.append(Task.model_validate(raw))
        except ValidationError:
            logger.warning("Skipping malformed task record: %r", raw)
    return tasks


def _created(data: Any) -> bool:
    if data is None or not isinstance(data, Mapping):
        return False
    return not data.get("error")


class DashboardController:
    """
    Signed-in page: task list with filters, add form, per-task edit/delete.

    Every mutation is followed by a full re-fetch through `refresh()`; the view
    only ever shows the latest list response for the current filter.
    """

    def __init__(
        self,
        api: TaskApiClient,
        session: SessionContext,
        *,
        flash_seconds: float = DEFAULT_FLASH_SECONDS,
        clock: Clock = time.monotonic,
        router: Optional[EventRouter] = None,
    ) -> None:
        self._api = api
        self._session = session
        self._flash_seconds = flash_seconds
        self._message = MessageSlot(clock=clock)
        self.filter = TaskFilter()
        self.view: TaskListView = render_task_list(None)
        self.welcome: Optional[str] = None
        self.router = router or EventRouter()
        self.router.register(ACTION_EDIT, self.edit_task)
        self.router.register(ACTION_DELETE, self.delete_task)

    @property
    def message(self) -> Optional[StatusMessage]:
        return self._message.current

    # -------------------- page lifecycle --------------------
    def load(self) -> bool:
        """Require a session, greet the user and render. Returns False if signed out."""
        user = self._session.get_user()
        token = self._session.get_token()
        if not user or not token:
            logger.info("No session on dashboard load; signing out")
            self._session.clear_session()
            return False
        self.welcome = f"Hi, {user.name}"
        self.refresh()
        return True

    def logout(self) -> None:
        self._session.clear_session()

    # -------------------- rendering --------------------
    def refresh(self) -> TaskListView:
        """Fetch the list under the current filter and rebuild the view."""
        return self._render(self.filter)

    def apply_filters(self, status: str = STATUS_ALL, search: str = "") -> TaskListView:
        """Re-render under a new filter; it becomes current only once the fetch answers."""
        return self._render(TaskFilter(status=status or STATUS_ALL, search=search))

    def _render(self, task_filter: TaskFilter) -> TaskListView:
        token = self._session.get_token()
        if not token:
            return self.view
        try:
            data = self._api.list_tasks(token, task_filter.status, task_filter.search)
        except TaskApiNetworkError as exc:
            # filter and view stay paired with the last answered fetch
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
            return self.view

        self.filter = task_filter
        if isinstance(data, list):
            self.view = render_task_list(_parse_tasks(data))
        else:
            self.view = render_task_list(None)
            if data:
                self._message.show(failure(server_text(data, TASK_LOAD_FAILED)))
        return self.view

    # -------------------- mutations --------------------
    def add_task(self, draft: TaskDraft) -> bool:
        """Create a task, then re-render whether or not the server accepted it."""
        token = self._session.get_token()
        try:
            created = self._api.create_task(token or "", draft.to_payload())
        except TaskApiNetworkError as exc:
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
            self.refresh()
            return False

        ok = _created(created)
        if ok:
            self._message.flash(TASK_ADDED, self._flash_seconds)
        else:
            self._message.show(failure(TASK_CREATE_FAILED))
        self.refresh()
        return ok

    def delete_task(self, task_id: TaskId) -> None:
        """Delete without confirmation, then re-render whatever the server reports."""
        token = self._session.get_token()
        try:
            self._api.delete_task(token or "", task_id)
        except TaskApiNetworkError as exc:
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
        self.refresh()

    def edit_task(self, task_id: TaskId, edit: TaskEdit | Mapping[str, Any]) -> bool:
        """
        Replace title, description and status of one task.

        `edit` may be a ready TaskEdit or the raw form fields; raw fields are
        validated first and nothing is sent if they are rejected.
        """
        if not isinstance(edit, TaskEdit):
            try:
                edit = TaskEdit.parse(edit.get("title"), edit.get("description"), edit.get("status"))
            except EditValidationError as exc:
                self._message.show(failure(str(exc)))
                return False

        token = self._session.get_token()
        try:
            self._api.update_task(token or "", task_id, edit.to_payload())
        except TaskApiNetworkError as exc:
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
            self.refresh()
            return False
        self.refresh()
        return True


__all__ = ["DashboardController"]
