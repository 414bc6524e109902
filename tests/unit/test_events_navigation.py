from __future__ import annotations

import pytest

from common.events import EventRouter, UnknownActionError
from common.navigation import Navigator, Page
from common.render import ActionBinding


def test_dispatch_passes_task_id_and_args():
    calls = []
    router = EventRouter()
    router.register("edit", lambda task_id, fields: calls.append((task_id, fields)) or "done")

    out = router.dispatch(ActionBinding(action="edit", task_id=7, label="Edit"), {"title": "x"})

    assert out == "done"
    assert calls == [(7, {"title": "x"})]
    assert router.actions() == ("edit",)


def test_unknown_action_raises():
    router = EventRouter()
    with pytest.raises(UnknownActionError):
        router.dispatch(ActionBinding(action="archive", task_id=1, label="Archive"))


def test_redirect_notifies_listener_and_records_history():
    seen = []
    nav = Navigator(listener=seen.append)

    nav.redirect(Page.DASHBOARD)
    nav.redirect(Page.AUTH)

    assert nav.current is Page.AUTH
    assert seen == [Page.DASHBOARD, Page.AUTH]
    assert nav.history == [Page.AUTH, Page.DASHBOARD, Page.AUTH]
    assert Page.DASHBOARD.value == "dashboard"
