from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from .models import STATUS_ALL, TaskId


logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:5000/api"

Payload = Union[Dict[str, Any], List[Any], None]


class TaskApiError(RuntimeError):
    """Base error for the task service client."""


class TaskApiNetworkError(TaskApiError):
    """The request never produced a usable JSON body (transport or parse failure)."""


class TaskApiClient:
    """
    Thin client for the task service REST API.

    Notes
    - One HTTP request per call, no retries. Whatever JSON the server returns is
      handed back as-is, regardless of HTTP status; callers decide success by
      inspecting the shape (`token`, `error`, `message`, list vs. object).
    - Transport failures and non-JSON bodies raise `TaskApiNetworkError`.
    - Authenticated calls send `Authorization: Bearer <token>`.
    """

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self._timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Auth ---------------
    def register(self, name: str, email: str, password: str) -> Payload:
        """POST /auth/register. Returns `{message}` or `{error}`."""
        return self._request(
            "POST",
            "/auth/register",
            json_body={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> Payload:
        """POST /auth/login. Returns `{token, user}` on success, `{message}` otherwise."""
        return self._request("POST", "/auth/login", json_body={"email": email, "password": password})

    # --------------- Tasks ---------------
    def list_tasks(self, token: str, status: str = STATUS_ALL, search: str = "") -> Payload:
        """
        GET /tasks?status=&search=

        Both query parameters are always sent (URL-encoded by httpx), so the
        default request is `?status=All&search=`.
        """
        return self._request(
            "GET",
            "/tasks",
            token=token,
            params={"status": status, "search": search},
        )

    def create_task(self, token: str, task: Mapping[str, Any]) -> Payload:
        return self._request("POST", "/tasks", token=token, json_body=dict(task))

    def update_task(self, token: str, task_id: TaskId, updates: Mapping[str, Any]) -> Payload:
        """PUT /tasks/<id> with full or partial field replacement."""
        return self._request("PUT", f"/tasks/{task_id}", token=token, json_body=dict(updates))

    def delete_task(self, token: str, task_id: TaskId) -> Payload:
        return self._request("DELETE", f"/tasks/{task_id}", token=token)

    # --------------- Internal ---------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Payload:
        headers: Dict[str, str] = {}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, path)
        try:
            resp = self._client.request(
                method,
                self._url(path),
                params=params,
                json=json_body,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TaskApiNetworkError(f"Could not reach task service: {exc}") from exc

        logger.debug("%s %s -> HTTP %s", method, path, resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:  # JSON decode error
            logger.warning("%s %s returned a non-JSON body (HTTP %s)", method, path, resp.status_code)
            raise TaskApiNetworkError(
                f"Unreadable response from task service (HTTP {resp.status_code})"
            ) from exc

    def _url(self, path: str) -> str:
        return f"{self._api_base}{path}"


__all__ = [
    "DEFAULT_API_BASE",
    "Payload",
    "TaskApiClient",
    "TaskApiError",
    "TaskApiNetworkError",
]
