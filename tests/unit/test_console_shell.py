from __future__ import annotations

from typing import List

import pytest

from auth.controller import AuthController, AuthMode
from common.navigation import Navigator, Page
from common.tasks_api import TaskApiClient
from console.shell import ConsoleShell
from dashboard.controller import DashboardController
from state.session_store import MemorySessionStore, SessionContext


class _Script:
    """Feeds scripted answers to prompts; raises EOFError when exhausted."""

    def __init__(self, answers: List[str]) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def _shell(service, clock, answers: List[str], *, page: Page = Page.AUTH, signed_in: bool = False):
    nav = Navigator(page)
    ctx = SessionContext(MemorySessionStore(), navigator=nav)
    if signed_in:
        ctx.set_session(service.TOKEN, {"id": 1, "name": "Ann", "email": "ann@example.com"})
    out: List[str] = []
    script = _Script(answers)
    shell = ConsoleShell(
        TaskApiClient(client=service.client()),
        ctx,
        nav,
        clock=clock,
        input_fn=script,
        output_fn=out.append,
        password_fn=script,
    )
    return shell, nav, ctx, out


def test_register_login_and_land_on_dashboard(service, clock):
    shell, nav, ctx, out = _shell(
        service,
        clock,
        [
            "register", "Ann", "ann@example.com", "pw",
            "login", "ann@example.com", "pw",
            "exit",
        ],
    )
    shell.run()

    assert nav.current is Page.DASHBOARD
    assert isinstance(shell.controller, DashboardController)
    assert ctx.get_token() == service.TOKEN
    assert "[ok] Registered! Now login." in out
    assert "Hi, Ann" in out
    assert out[-1] == "Goodbye."


def test_failed_login_shows_failure_and_stays(service, clock):
    shell, nav, ctx, out = _shell(service, clock, ["login", "nobody@example.com", "pw"])
    shell.run()

    assert nav.current is Page.AUTH
    assert "[x] bad credentials" in out
    assert ctx.get_token() is None


def test_tab_switch(service, clock):
    shell, _, _, out = _shell(service, clock, ["tab register", "tab nowhere"])
    shell.run()

    assert isinstance(shell.controller, AuthController)
    assert shell.controller.mode is AuthMode.REGISTER
    assert "Usage: tab login|register" in out


def test_dashboard_add_filter_edit_delete_logout(service, clock):
    shell, nav, ctx, out = _shell(
        service,
        clock,
        [
            "add", "Write report", "by Friday", "",
            "add", "Ship it", "", "ip",
            "filter ip",
            "edit 2", "Ship v2", "tomorrow", "c",
            "filter all",
            "rm 1",
            "logout",
        ],
        page=Page.DASHBOARD,
        signed_in=True,
    )
    shell.run()

    assert service.tasks == [
        {"id": 2, "title": "Ship v2", "description": "tomorrow", "status": "Completed"},
    ]
    gets = [r for r in service.requests if r.method == "GET"]
    assert ("In Progress", "") in [(r.url.params["status"], r.url.params["search"]) for r in gets]
    assert nav.current is Page.AUTH
    assert ctx.get_token() is None
    assert isinstance(shell.controller, AuthController)
    assert any("[progress] In Progress" in line for line in out)


def test_edit_unknown_id_and_invalid_fields(service, clock):
    service.tasks.append({"id": 1, "title": "a", "description": "d", "status": "Pending"})
    shell, _, _, out = _shell(
        service,
        clock,
        ["edit 99", "edit 1", "", "d", "p", "bogus"],
        page=Page.DASHBOARD,
        signed_in=True,
    )
    shell.run()

    assert "No task 99 in the current list." in out
    assert any(line.startswith("[x] Invalid edit: title") for line in out)
    assert "Unknown command. Type 'help' for instructions." in out
    assert not [r for r in service.requests if r.method == "PUT"]


def test_dashboard_start_without_session_falls_back_to_auth(service, clock):
    shell, nav, _, out = _shell(service, clock, [], page=Page.DASHBOARD)
    shell.run()

    assert nav.current is Page.AUTH
    assert isinstance(shell.controller, AuthController)
    assert service.requests == []
    assert out[-1] == "Goodbye."


@pytest.mark.parametrize("page,signed_in,marker", [(Page.AUTH, False, "login"), (Page.DASHBOARD, True, "filter")])
def test_help_lists_page_commands(service, clock, page, signed_in, marker):
    shell, _, _, out = _shell(service, clock, ["help"], page=page, signed_in=signed_in)
    shell.run()
    assert any(line.strip().startswith(marker) for line in out)


def test_add_rejects_filter_only_status(service, clock):
    shell, _, _, out = _shell(
        service,
        clock,
        ["add", "Plan", "", "all", "add", "Plan", "", "done"],
        page=Page.DASHBOARD,
        signed_in=True,
    )
    shell.run()

    assert "Status must be one of: Pending, In Progress, Completed" in out
    posts = [r for r in service.requests if r.method == "POST"]
    assert len(posts) == 1
    assert service.tasks == [{"id": 1, "title": "Plan", "description": "", "status": "Completed"}]
