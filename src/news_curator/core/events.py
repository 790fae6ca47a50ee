"""Structured pipeline events.

Components report progress by calling an injected ``EventHook`` instead of
writing to the console. The default hook forwards events to ``logging``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger("news_curator.events")


@dataclass(frozen=True)
class Event:
    """A named pipeline event with arbitrary fields."""

    name: str
    fields: dict[str, Any] = field(default_factory=dict)


EventHook = Callable[[Event], None]


def log_event(event: Event) -> None:
    """Default hook: emit the event as a debug log record."""
    logger.debug("%s %s", event.name, event.fields, extra={"event": event.name})


def null_hook(event: Event) -> None:
    """Hook that discards every event."""


class EventRecorder:
    """Hook that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> list[Event]:
        return [e for e in self.events if e.name == name]
