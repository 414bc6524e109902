from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from .render import ActionBinding


logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class UnknownActionError(KeyError):
    """No handler registered for the binding's action."""


class EventRouter:
    """
    Routes view action bindings to handlers registered by a page controller.

    Handlers receive the binding's task id followed by any extra positional
    arguments passed to `dispatch`.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, action: str, handler: Handler) -> None:
        self._handlers[action] = handler

    def actions(self) -> tuple[str, ...]:
        return tuple(sorted(self._handlers))

    def dispatch(self, binding: ActionBinding, *args: Any) -> Any:
        handler = self._handlers.get(binding.action)
        if handler is None:
            raise UnknownActionError(binding.action)
        logger.debug("dispatch %s for task %s", binding.action, binding.task_id)
        return handler(binding.task_id, *args)


__all__ = ["EventRouter", "UnknownActionError"]
