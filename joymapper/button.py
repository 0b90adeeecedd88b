"""A joystick button mapped to a key, a mouse button or a layout switch."""

from __future__ import annotations

import re
from typing import Callable, Iterator

from .constants import FREQ, MAXKEY
from .event import EventType, FakeEvent, send_event
from .keycode import ktos

_SEPARATORS = re.compile(r"[\s,]+")
_INTEGER = re.compile(r"[+-]?\d+")


def _parse_code(words: Iterator[str], keyword: str) -> int:
    token = next(words, None)
    if token is None:
        raise ValueError(f"missing value after {keyword!r}")
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"invalid value {token!r} after {keyword!r}")
    value = int(token)
    if not 0 <= value <= MAXKEY:
        raise ValueError(f"value {value} after {keyword!r} is out of range")
    return value


class Button:
    """State and settings of one joystick button.

    While rapid fire is active, ``timer_active`` is set and the owner should
    call ``timer_called`` every MSEC milliseconds.
    """

    def __init__(
        self, index: int, on_load_layout: Callable[[str], None] | None = None
    ) -> None:
        self.index = index
        self.on_load_layout = on_load_layout
        self.is_button_pressed = False
        self.is_down = False
        self.tick = 0
        self.timer_active = False
        self.rapidfire = False
        self.sticky = False
        self.use_mouse = False
        self.keycode = 0
        self.has_layout = False
        self.layout = ""
        self.to_default()

    @property
    def name(self) -> str:
        return f"Button {self.index + 1}"

    def read(self, line: str) -> None:
        """Apply the settings in one layout-file line; raise ValueError if malformed."""
        words = iter(_SEPARATORS.split(line))
        for word in words:
            keyword = word.lower()
            if keyword in ("mouse", "key"):
                self.keycode = _parse_code(words, keyword)
                self.use_mouse = keyword == "mouse"
            elif keyword == "layout":
                token = next(words, None)
                if token is None:
                    raise ValueError("missing layout name")
                self.layout = token.replace("\\s", " ")
                self.has_layout = True
            elif keyword == "rapidfire":
                self.rapidfire = True
            elif keyword == "sticky":
                self.sticky = True

    def write(self) -> str:
        """Return the layout-file line describing this button."""
        parts = [f"\tButton {self.index + 1}: "]
        if self.rapidfire:
            parts.append("rapidfire, ")
        if self.sticky:
            parts.append("sticky, ")
        parts.append(f"{'mouse' if self.use_mouse else 'key'} {self.keycode}")
        if self.has_layout:
            parts.append(" layout " + self.layout.replace(" ", "\\s"))
        parts.append("\n")
        return "".join(parts)

    def release(self) -> None:
        """Release a simulated key that is currently held."""
        if self.is_down:
            self._click(False)

    def jsevent(self, value: int) -> None:
        """Handle a press (1) or release (0) from the device."""
        if self.has_layout:
            if value == 1 and not self.is_button_pressed:
                self.is_button_pressed = True
                if self.on_load_layout is not None:
                    self.on_load_layout(self.layout)
            elif value == 0:
                self.is_button_pressed = False
            return

        pressed = value == 1
        if self.sticky:
            # a sticky button changes state only when pressed
            if value != 1:
                return
            self.is_button_pressed = not self.is_button_pressed
        elif pressed != self.is_button_pressed:
            self.is_button_pressed = pressed
            if self.rapidfire:
                if pressed:
                    self.tick = 0
                    self.timer_active = True
                else:
                    self.timer_active = False
                    if self.is_down:
                        self._click(False)
                    self.tick = 0
        else:
            return

        if not self.rapidfire:
            self._click(self.is_button_pressed)

    def to_default(self) -> None:
        self.rapidfire = False
        self.sticky = False
        self.use_mouse = False
        self.keycode = 0
        self.has_layout = False
        self.timer_active = False

    def is_default(self) -> bool:
        return not (
            self.rapidfire
            or self.sticky
            or self.use_mouse
            or self.keycode != 0
            or self.has_layout
        )

    def status(self, lookup: Callable[[int], str] | None = None) -> str:
        """A label describing what this button does."""
        if self.has_layout:
            return f"{self.name} : {self.layout}"
        if self.use_mouse:
            return f"{self.name} : Mouse {self.keycode}"
        return f"{self.name} : {ktos(self.keycode, lookup)}"

    def set_key(self, mouse: bool, value: int) -> None:
        self.use_mouse = mouse
        self.keycode = value

    def timer_tick(self, tick: int) -> None:
        """Press and release on a fixed cycle while held down."""
        if self.is_button_pressed:
            if tick % FREQ == 0:
                self._click(True)
            if tick % FREQ == FREQ // 2:
                self._click(False)

    def timer_called(self) -> None:
        self.tick += 1
        self.timer_tick(self.tick)

    def _click(self, press: bool) -> None:
        if self.is_down == press:
            return
        self.is_down = press
        if press:
            etype = EventType.MOUSE_DOWN if self.use_mouse else EventType.KEY_DOWN
        else:
            etype = EventType.MOUSE_UP if self.use_mouse else EventType.KEY_UP
        send_event(FakeEvent(etype, keycode=self.keycode))