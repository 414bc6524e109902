"""Interactive console presentation of the auth and dashboard pages.

The shell owns no task state: each redirect builds a fresh controller for the
target page, and every screen is printed from the controller's current view.
"""
from __future__ import annotations

import getpass
import logging
import time
from typing import Callable, List, Optional, Union

from auth.controller import AuthController, AuthMode
from common.messages import StatusMessage
from common.models import FILTER_STATUSES, STATUS_ALL, STATUS_PENDING, TASK_STATUSES, TaskDraft
from common.navigation import Navigator, Page
from common.render import ACTION_DELETE, ACTION_EDIT, format_task_list
from common.tasks_api import TaskApiClient
from dashboard.controller import DashboardController
from state.session_store import SessionContext


logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]
Controller = Union[AuthController, DashboardController]

FILTER_ALIASES = {
    "all": STATUS_ALL,
    "p": "Pending",
    "pending": "Pending",
    "ip": "In Progress",
    "in-progress": "In Progress",
    "progress": "In Progress",
    "c": "Completed",
    "completed": "Completed",
    "done": "Completed",
}

AUTH_HELP = (
    "Commands:",
    "  login               Log in (prompts for email and password)",
    "  register            Create an account (prompts for name, email, password)",
    "  tab login|register  Switch between the login and register forms",
    "  help                Show this help",
    "  exit                Quit",
)

DASHBOARD_HELP = (
    "Commands:",
    "  filter [status] [search...]  Filter by status (all/p/ip/c) and title search",
    "  add                          Add a task (prompts for fields)",
    "  edit <id>                    Edit title, description and status of a task",
    "  delete <id> | rm <id>        Delete a task",
    "  refresh                      Reload the list",
    "  logout                       Sign out",
    "  help                         Show this help",
    "  exit                         Quit",
)


def _format_message(msg: Optional[StatusMessage]) -> Optional[str]:
    if msg is None:
        return None
    mark = "x" if msg.is_failure else "ok"
    return f"[{mark}] {msg.text}"


def _resolve_status(raw: str) -> Optional[str]:
    key = raw.strip().lower()
    if key in FILTER_ALIASES:
        return FILTER_ALIASES[key]
    for status in FILTER_STATUSES:
        if status.lower() == key:
            return status
    return None


def _resolve_task_status(raw: str) -> Optional[str]:
    """Like _resolve_status, but only statuses a task can actually have."""
    status = _resolve_status(raw)
    return status if status in TASK_STATUSES else None


class ConsoleShell:
    def __init__(
        self,
        api: TaskApiClient,
        session: SessionContext,
        navigator: Navigator,
        *,
        flash_seconds: float = 1.2,
        clock: Callable[[], float] = time.monotonic,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
        password_fn: InputFn = getpass.getpass,
    ) -> None:
        self._api = api
        self._session = session
        self._navigator = navigator
        self._flash_seconds = flash_seconds
        self._clock = clock
        self._input = input_fn
        self._out = output_fn
        self._password = password_fn
        self._running = False
        self.controller: Controller = self._build(navigator.current)
        navigator.set_listener(self._on_redirect)

    # -------------------- page construction --------------------
    def _build(self, page: Page) -> Controller:
        if page is Page.DASHBOARD:
            return DashboardController(
                self._api,
                self._session,
                flash_seconds=self._flash_seconds,
                clock=self._clock,
            )
        return AuthController(self._api, self._session)

    def _on_redirect(self, page: Page) -> None:
        self.controller = self._build(page)
        if isinstance(self.controller, DashboardController):
            self.controller.load()

    def start(self) -> None:
        """Enter the page the navigator is on (a dashboard start validates the session)."""
        if isinstance(self.controller, DashboardController):
            self.controller.load()

    # -------------------- loop --------------------
    def run(self) -> None:
        self.start()
        self._running = True
        try:
            while self._running:
                self.show()
                line = self._input("\n> ").strip()
                if not line:
                    continue
                self.handle(line)
        except (KeyboardInterrupt, EOFError):
            self._out("Goodbye.")
        finally:
            self._running = False

    def show(self) -> None:
        c = self.controller
        if isinstance(c, DashboardController):
            self._out(c.welcome or "Dashboard")
            self._out(f"Filter: status={c.filter.status} search={c.filter.search!r}")
            self._out(format_task_list(c.view))
        else:
            self._out(f"Task service: {c.mode.value}")
        text = _format_message(c.message)
        if text:
            self._out(text)

    def handle(self, line: str) -> None:
        tokens = line.split()
        cmd = tokens[0].lower()
        logger.debug("command %r on %s page", cmd, self._navigator.current.value)
        if cmd == "exit":
            self._running = False
            self._out("Goodbye.")
            return
        if cmd == "help":
            help_lines = DASHBOARD_HELP if isinstance(self.controller, DashboardController) else AUTH_HELP
            for h in help_lines:
                self._out(h)
            return
        if isinstance(self.controller, DashboardController):
            self._dashboard_command(self.controller, cmd, tokens[1:])
        else:
            self._auth_command(self.controller, cmd, tokens[1:])

    # -------------------- auth page --------------------
    def _auth_command(self, c: AuthController, cmd: str, args: List[str]) -> None:
        if cmd == "tab":
            if len(args) != 1 or args[0].lower() not in ("login", "register"):
                self._out("Usage: tab login|register")
                return
            c.switch_mode(AuthMode(args[0].lower()))
        elif cmd == "login":
            if c.mode is not AuthMode.LOGIN:
                c.switch_mode(AuthMode.LOGIN)
            email = self._input("Email: ")
            password = self._password("Password: ")
            c.submit_login(email, password)
        elif cmd == "register":
            if c.mode is not AuthMode.REGISTER:
                c.switch_mode(AuthMode.REGISTER)
            name = self._input("Name: ")
            email = self._input("Email: ")
            password = self._password("Password: ")
            c.submit_register(name, email, password)
        else:
            self._out("Unknown command. Type 'help' for instructions.")

    # -------------------- dashboard page --------------------
    def _dashboard_command(self, c: DashboardController, cmd: str, args: List[str]) -> None:
        if cmd == "filter":
            status = STATUS_ALL
            search_parts = args
            if args:
                resolved = _resolve_status(args[0])
                if resolved is not None:
                    status = resolved
                    search_parts = args[1:]
            c.apply_filters(status, " ".join(search_parts))
        elif cmd == "refresh":
            c.refresh()
        elif cmd == "add":
            title = self._input("Title: ")
            description = self._input("Description: ")
            raw_status = self._input(f"Status ({' / '.join(TASK_STATUSES)}) [{STATUS_PENDING}]: ")
            status = _resolve_task_status(raw_status) if raw_status.strip() else STATUS_PENDING
            if status is None:
                self._out(f"Status must be one of: {', '.join(TASK_STATUSES)}")
                return
            c.add_task(TaskDraft(title=title, description=description, status=status))
        elif cmd in ("edit", "delete", "rm"):
            self._item_command(c, ACTION_EDIT if cmd == "edit" else ACTION_DELETE, args)
        elif cmd == "logout":
            c.logout()
        else:
            self._out("Unknown command. Type 'help' for instructions.")

    def _item_command(self, c: DashboardController, action: str, args: List[str]) -> None:
        if len(args) != 1:
            self._out(f"Usage: {action} <id>")
            return
        item = c.view.find(args[0].rstrip("."))
        binding = item.binding(action) if item else None
        if binding is None:
            self._out(f"No task {args[0]} in the current list.")
            return
        if action == ACTION_EDIT:
            fields = {
                "title": self._input("New title: "),
                "description": self._input("New description: "),
                "status": _resolve_task_status(self._input(f"New status ({' / '.join(TASK_STATUSES)}): ")) or "",
            }
            c.router.dispatch(binding, fields)
        else:
            c.router.dispatch(binding)


__all__ = ["ConsoleShell"]
