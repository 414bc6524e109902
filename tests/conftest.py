import json
import os
import sys
from typing import Any, Dict, List, Optional

import httpx
import pytest


def pytest_configure():
    # Ensure `src/` is importable as top-level for `common.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    src_path = os.path.join(root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


class FakeTaskService:
    """
    In-memory stand-in for the task service, served through httpx.MockTransport.

    Mirrors the consumed contract: register/login under /api/auth, CRUD under
    /api/tasks with bearer auth, status/search filtering on list.
    """

    TOKEN = "abc"

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {}
        self.tasks: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self._next_id = 1

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handle))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if path == "/api/auth/register" and request.method == "POST":
            email = body.get("email", "")
            if not email or not body.get("password"):
                return httpx.Response(400, json={"error": "All fields are required"})
            if email in self.users:
                return httpx.Response(400, json={"message": "User already exists"})
            self.users[email] = {"id": len(self.users) + 1, "name": body.get("name", ""), "email": email, "password": body["password"]}
            return httpx.Response(201, json={"message": "User registered"})

        if path == "/api/auth/login" and request.method == "POST":
            user = self.users.get(body.get("email", ""))
            if user is None or user["password"] != body.get("password"):
                return httpx.Response(401, json={"message": "bad credentials"})
            public = {k: v for k, v in user.items() if k != "password"}
            return httpx.Response(200, json={"token": self.TOKEN, "user": public})

        if not path.startswith("/api/tasks"):
            return httpx.Response(404, json={"error": "Not found"})
        if request.headers.get("Authorization") != f"Bearer {self.TOKEN}":
            return httpx.Response(401, json={"error": "Unauthorized"})

        if path == "/api/tasks" and request.method == "GET":
            status = request.url.params.get("status", "All")
            search = request.url.params.get("search", "").lower()
            out = [
                t for t in self.tasks
                if (status == "All" or t["status"] == status) and search in t["title"].lower()
            ]
            return httpx.Response(200, json=out)

        if path == "/api/tasks" and request.method == "POST":
            if not body.get("title"):
                return httpx.Response(400, json={"error": "Title is required"})
            task = {
                "id": self._next_id,
                "title": body["title"],
                "description": body.get("description", ""),
                "status": body.get("status") or "Pending",
            }
            self._next_id += 1
            self.tasks.append(task)
            return httpx.Response(201, json=task)

        task = self._find(path.rsplit("/", 1)[-1])
        if task is None:
            return httpx.Response(404, json={"error": "Task not found"})
        if request.method == "PUT":
            task.update({k: v for k, v in body.items() if k in ("title", "description", "status")})
            return httpx.Response(200, json=task)
        if request.method == "DELETE":
            self.tasks.remove(task)
            return httpx.Response(200, json={"message": "Task deleted"})
        return httpx.Response(405, json={"error": "Method not allowed"})

    def _find(self, raw_id: str) -> Optional[Dict[str, Any]]:
        for t in self.tasks:
            if str(t["id"]) == raw_id:
                return t
        return None


class FakeClock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:  # acts like time.monotonic
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


@pytest.fixture
def service() -> FakeTaskService:
    return FakeTaskService()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
