"""
Common building blocks for the task client.

Modules:
- tasks_api: task service HTTP client (httpx)
- models: Task/User records and form models (pydantic)
- render: declarative task list view and its text formatting
- events: routing of per-item action bindings
- navigation: auth/dashboard page redirects
- config: environment-driven settings
- logging_setup: console logging configuration
"""

__all__ = [
    "config",
    "events",
    "logging_setup",
    "models",
    "navigation",
    "render",
    "tasks_api",
]
