"""Typed event registry used by shell plugins."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger

from kishell.host.snapshot import EvaluatedSnippet

E = TypeVar("E")


@dataclass(frozen=True)
class OnEval:
    """Fired once per executed snippet, whatever its result."""

    snippet: EvaluatedSnippet


class EventManager:
    """Dispatches events synchronously to handlers registered per event type."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}

    def register(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register a handler and return a callable that unregisters it."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("events.register type={} handlers={}", event_type.__name__, len(self._handlers[event_type]))

        def _unregister() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unregister

    def emit(self, event: object) -> None:
        """Run every handler for ``event`` in registration order.

        Handler exceptions propagate to the caller; later handlers do not run.
        """
        for handler in list(self._handlers.get(type(event), ())):
            handler(event)
