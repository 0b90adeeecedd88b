"""Synthetic input events and the sink that delivers them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Protocol


class EventType(enum.Enum):
    KEY_UP = "key_up"
    KEY_DOWN = "key_down"
    MOUSE_UP = "mouse_up"
    MOUSE_DOWN = "mouse_down"
    MOUSE_MOVE = "mouse_move"
    MOUSE_MOVE_ABSOLUTE = "mouse_move_absolute"


_BUTTON_EVENTS = frozenset(
    {EventType.KEY_UP, EventType.KEY_DOWN, EventType.MOUSE_UP, EventType.MOUSE_DOWN}
)


@dataclass(frozen=True)
class FakeEvent:
    """A key, mouse-button or pointer-motion event to be injected."""

    type: EventType
    keycode: int = 0
    x: int = 0
    y: int = 0


class EventSink(Protocol):
    def send(self, event: FakeEvent) -> None: ...


class RecordingSink:
    """A sink that keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[FakeEvent] = []

    def send(self, event: FakeEvent) -> None:
        self.events.append(event)


class _Dispatcher:
    def __init__(self) -> None:
        self.sink: EventSink | None = None
        self.remember_x = 0
        self.remember_y = 0


_dispatcher = _Dispatcher()


def set_sink(sink: EventSink | None) -> EventSink | None:
    """Install the sink that receives events; return the previous one.

    With no sink installed, events are filtered but not delivered anywhere.
    """
    previous = _dispatcher.sink
    _dispatcher.sink = sink
    return previous


def send_event(event: FakeEvent) -> FakeEvent | None:
    """Deliver an event to the current sink.

    Events that would have no effect (a zero motion, a zero key code) are
    dropped. Absolute motion keeps the last non-zero coordinate on each axis.
    Returns the event that was delivered, or None if it was dropped.
    """
    if event.type is EventType.MOUSE_MOVE:
        if event.x == 0 and event.y == 0:
            return None
    elif event.type is EventType.MOUSE_MOVE_ABSOLUTE:
        if event.x:
            _dispatcher.remember_x = event.x
        if event.y:
            _dispatcher.remember_y = event.y
        event = replace(event, x=_dispatcher.remember_x, y=_dispatcher.remember_y)
    elif event.type in _BUTTON_EVENTS and event.keycode == 0:
        return None

    if _dispatcher.sink is not None:
        _dispatcher.sink.send(event)
    return event