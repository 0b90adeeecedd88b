"""A joystick axis mapped to keys, mouse buttons or pointer motion."""

from __future__ import annotations

import enum
import math
import re
from typing import Iterator

from .constants import (
    FREQ,
    JOYMAX,
    JOYMIN,
    MAXKEY,
    MAXMOUSESPEED,
    SENSITIVITY_MAX,
    SENSITIVITY_MIN,
)
from .event import EventType, FakeEvent, send_event

DZONE = 3000
XZONE = 30000

_SEPARATORS = re.compile(r"[\s,]+")
_INTEGER = re.compile(r"[+-]?\d+")


class Interpretation(enum.IntEnum):
    ZERO_ONE = 0
    GRADIENT = 1
    ABSOLUTE_POS = 2


class Mode(enum.IntEnum):
    KEYBOARD = 0
    MOUSE_POS_VERT = 1
    MOUSE_NEG_VERT = 2
    MOUSE_POS_HOR = 3
    MOUSE_NEG_HOR = 4
    KEYBOARD_AND_MOUSE_HOR = 5
    KEYBOARD_AND_MOUSE_VERT = 6
    KEYBOARD_AND_MOUSE_HOR_REV = 7
    KEYBOARD_AND_MOUSE_VERT_REV = 8


class TransferCurve(enum.IntEnum):
    LINEAR = 0
    QUADRATIC = 1
    CUBIC = 2
    QUADRATIC_EXTREME = 3
    POWER_FUNCTION = 4


_KEY_MODES = frozenset(
    {
        Mode.KEYBOARD,
        Mode.KEYBOARD_AND_MOUSE_HOR,
        Mode.KEYBOARD_AND_MOUSE_VERT,
        Mode.KEYBOARD_AND_MOUSE_HOR_REV,
        Mode.KEYBOARD_AND_MOUSE_VERT_REV,
    }
)

_MOUSE_MODES = frozenset(
    {Mode.MOUSE_POS_VERT, Mode.MOUSE_NEG_VERT, Mode.MOUSE_POS_HOR, Mode.MOUSE_NEG_HOR}
)

# Sign of the x and y pointer motion for each mode that moves the mouse.
_DIRECTIONS = {
    Mode.MOUSE_POS_VERT: (0, 1),
    Mode.MOUSE_NEG_VERT: (0, -1),
    Mode.MOUSE_POS_HOR: (1, 0),
    Mode.MOUSE_NEG_HOR: (-1, 0),
    Mode.KEYBOARD_AND_MOUSE_HOR: (1, 0),
    Mode.KEYBOARD_AND_MOUSE_HOR_REV: (-1, 0),
    Mode.KEYBOARD_AND_MOUSE_VERT: (0, 1),
    Mode.KEYBOARD_AND_MOUSE_VERT_REV: (0, -1),
}

_MODE_WORDS = {
    "mouse+v": Mode.MOUSE_POS_VERT,
    "mouse-v": Mode.MOUSE_NEG_VERT,
    "mouse+h": Mode.MOUSE_POS_HOR,
    "mouse-h": Mode.MOUSE_NEG_HOR,
    "keyboardandmousehor": Mode.KEYBOARD_AND_MOUSE_HOR,
    "keyboardandmousevert": Mode.KEYBOARD_AND_MOUSE_VERT,
    "keyboardandmousehorrev": Mode.KEYBOARD_AND_MOUSE_HOR_REV,
    "keyboardandmousevertrev": Mode.KEYBOARD_AND_MOUSE_VERT_REV,
}

_MODE_NAMES = {
    Mode.KEYBOARD: "keyboard",
    Mode.MOUSE_POS_VERT: "mouseposvert",
    Mode.MOUSE_NEG_VERT: "mousenegvert",
    Mode.MOUSE_POS_HOR: "mouseposhor",
    Mode.MOUSE_NEG_HOR: "mouseneghor",
    Mode.KEYBOARD_AND_MOUSE_HOR: "keyboardandmousehor",
    Mode.KEYBOARD_AND_MOUSE_VERT: "keyboardandmousevert",
    Mode.KEYBOARD_AND_MOUSE_HOR_REV: "keyboardandmousehorrev",
    Mode.KEYBOARD_AND_MOUSE_VERT_REV: "keyboardandmousevertrev",
}

_INTERPRETATION_NAMES = {
    Interpretation.ZERO_ONE: "ZeroOne",
    Interpretation.GRADIENT: "Gradient",
    Interpretation.ABSOLUTE_POS: "Absolute",
}

_INTERPRETATION_WORDS = {
    "zeroone": Interpretation.ZERO_ONE,
    "absolute": Interpretation.ABSOLUTE_POS,
    "gradient": Interpretation.GRADIENT,
}


def _half(value: int) -> int:
    """Halve an integer, truncating toward zero."""
    return int(value / 2)


def _clamp(value: float, low: float, high: float) -> float:
    return low if value < low else high if value > high else value


def _next_token(words: Iterator[str], keyword: str) -> str:
    token = next(words, None)
    if token is None:
        raise ValueError(f"missing value after {keyword!r}")
    return token


def _parse_int(words: Iterator[str], keyword: str, high: int) -> int:
    token = _next_token(words, keyword)
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"invalid value {token!r} after {keyword!r}")
    value = int(token)
    if not 0 <= value <= high:
        raise ValueError(f"value {value} after {keyword!r} is out of range")
    return value


def _parse_sensitivity(words: Iterator[str], keyword: str) -> float:
    token = _next_token(words, keyword)
    try:
        value = float(token)
    except ValueError:
        raise ValueError(f"invalid value {token!r} after {keyword!r}") from None
    if not SENSITIVITY_MIN <= value <= SENSITIVITY_MAX:
        raise ValueError(f"value {value} after {keyword!r} is out of range")
    return value


class Axis:
    """State and settings of one joystick axis.

    While ``timer_active`` is set the owner should call ``timer_called``
    every MSEC milliseconds.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        self.is_on = False
        self.is_down = False
        self.use_mouse = False
        self.state = 0
        self.tick = 0
        self.duration = 0
        self.timer_active = False
        self.interpretation = Interpretation.ZERO_ONE
        self.gradient = False
        self.absolute = False
        self.throttle = 0
        self.max_speed = 100
        self.transfer_curve = TransferCurve.QUADRATIC
        self.sensitivity = 1.0
        self.dzone = DZONE
        self.xzone = XZONE
        self.mode = Mode.KEYBOARD
        self.pkeycode = 0
        self.nkeycode = 0
        self.puse_mouse = False
        self.nuse_mouse = False
        self.downkey = 0
        self.inverse_range = 0.0
        self.sum_dist = 0.0
        self.to_default()
        self.tick = 0

    @property
    def name(self) -> str:
        return f"Axis {self.index + 1}"

    def _set_interpretation(self, interpretation: Interpretation) -> None:
        self.interpretation = interpretation
        self.gradient = interpretation is not Interpretation.ZERO_ONE
        self.absolute = interpretation is Interpretation.ABSOLUTE_POS

    def read(self, line: str) -> None:
        """Apply the settings in one layout-file line; raise ValueError if malformed.

        Unrecognised words are ignored.
        """
        words = iter(_SEPARATORS.split(line.lower()))
        for raw in words:
            word = raw[:-1] if raw.endswith(":") else raw
            if word == "maxspeed":
                self.max_speed = _parse_int(words, word, MAXMOUSESPEED)
            elif word == "dzone":
                self.dzone = _parse_int(words, word, JOYMAX)
            elif word == "xzone":
                self.xzone = _parse_int(words, word, JOYMAX)
            elif word == "tcurve":
                self.transfer_curve = TransferCurve(
                    _parse_int(words, word, TransferCurve.POWER_FUNCTION)
                )
            elif word == "sens":
                self.sensitivity = _parse_sensitivity(words, word)
            elif word == "+key":
                self.pkeycode = _parse_int(words, word, MAXKEY)
            elif word == "-key":
                self.nkeycode = _parse_int(words, word, MAXKEY)
            elif word == "+mouse":
                self.pkeycode = _parse_int(words, word, MAXKEY)
                self.puse_mouse = True
            elif word == "-mouse":
                self.nkeycode = _parse_int(words, word, MAXKEY)
                self.nuse_mouse = True
            elif word in _INTERPRETATION_WORDS:
                self._set_interpretation(_INTERPRETATION_WORDS[word])
            elif word == "throttle+":
                self.throttle = 1
            elif word == "throttle-":
                self.throttle = -1
            elif word in _MODE_WORDS:
                self.mode = _MODE_WORDS[word]
        self.adjust_gradient()

    def write(self) -> str:
        """Return the layout-file line describing this axis."""
        parts = [
            f"Axis {self.index + 1}: ",
            f"{_INTERPRETATION_NAMES[self.interpretation]}, ",
            f"dZone {self.dzone}, xZone {self.xzone}, "
            f"maxSpeed {self.max_speed}, tCurve {int(self.transfer_curve)}",
        ]
        if self.mode in _KEY_MODES:
            parts.append(
                f", {'+mouse' if self.puse_mouse else '+key'} {self.pkeycode}"
                f", {'-mouse' if self.nuse_mouse else '-key'} {self.nkeycode}"
            )
        parts.append(f", {_MODE_NAMES[self.mode]}\n")
        return "".join(parts)

    def release(self) -> None:
        """Release a simulated key that is currently held."""
        if self.is_down:
            self._move(False)
            self.is_down = False

    def _throttled(self, value: int) -> int:
        if self.throttle == 0:
            return value
        if self.throttle == -1:
            return _half(value + JOYMIN)
        return _half(value + JOYMAX)

    def _full_duration(self) -> int:
        return (abs(self.state) * FREQ) // JOYMAX

    def jsevent(self, value: int) -> None:
        """Handle a new position reported by the device."""
        self.state = self._throttled(value)

        if self.is_on and abs(self.state) <= self.dzone:
            self.is_on = False
            if self.gradient:
                self.duration = 0
                self.release()
                self.timer_active = False
                self.tick = 0
        elif not self.is_on and abs(self.state) >= self.dzone:
            self.is_on = True
            if self.gradient:
                self.duration = self._full_duration()
                self.timer_active = True
        else:
            return

        if not self.gradient:
            self._move(self.is_on)

    def to_default(self) -> None:
        self.release()
        self._set_interpretation(Interpretation.ZERO_ONE)
        self.throttle = 0
        self.max_speed = 100
        self.transfer_curve = TransferCurve.QUADRATIC
        self.sensitivity = 1.0
        self.dzone = DZONE
        self.tick = 0
        self.xzone = XZONE
        self.mode = Mode.KEYBOARD
        self.pkeycode = 0
        self.nkeycode = 0
        self.puse_mouse = False
        self.nuse_mouse = False
        self.downkey = 0
        self.state = 0
        self.adjust_gradient()

    def is_default(self) -> bool:
        return (
            self.interpretation is Interpretation.ZERO_ONE
            and not self.gradient
            and not self.absolute
            and self.throttle == 0
            and self.max_speed == 100
            and self.dzone == DZONE
            and self.xzone == XZONE
            and self.mode is Mode.KEYBOARD
            and self.pkeycode == 0
            and self.nkeycode == 0
            and not self.puse_mouse
            and not self.nuse_mouse
        )

    def in_dead_zone(self, value: int) -> bool:
        return abs(self._throttled(value)) < self.dzone

    def status(self) -> str:
        """A label describing what this axis does."""
        if self.mode is Mode.KEYBOARD:
            if self.throttle != 0:
                label = "THROTTLE"
            elif self.puse_mouse != self.nuse_mouse:
                label = "KEYBOARD/MOUSE"
            elif self.puse_mouse:
                label = "MOUSE"
            else:
                label = "KEYBOARD"
        else:
            label = "MOUSE"
        return f"{self.name} : [{label}]"

    def set_key(self, positive: bool, value: int, use_mouse: bool = False) -> None:
        if positive:
            self.pkeycode = value
            self.puse_mouse = use_mouse
        else:
            self.nkeycode = value
            self.nuse_mouse = use_mouse

    def timer_tick(self, tick: int) -> None:
        """Advance the gradient cycle by one timer step."""
        if not self.is_on:
            return
        if self.mode is not Mode.KEYBOARD:
            self._move(True)
            return
        if tick % FREQ == 0:
            if self.duration == FREQ:
                if not self.is_down:
                    self._move(True)
                self.duration = self._full_duration()
                return
            self._move(True)
        if tick % FREQ == self.duration:
            self._move(False)
            self.duration = self._full_duration()

    def timer_called(self) -> None:
        self.tick += 1
        self.timer_tick(self.tick)

    def adjust_gradient(self) -> None:
        span = self.xzone - self.dzone
        self.inverse_range = 1.0 / span if span else math.inf
        self.sum_dist = 0.0

    def _curve(self, u: float) -> float:
        curve = self.transfer_curve
        if curve is TransferCurve.QUADRATIC:
            return u * u
        if curve is TransferCurve.CUBIC:
            return u * u * u
        if curve is TransferCurve.QUADRATIC_EXTREME:
            return u * u * 1.5 if u >= 0.95 else u * u
        if curve is TransferCurve.POWER_FUNCTION:
            exponent = 1.0 / _clamp(self.sensitivity, 1e-8, 1e3)
            return _clamp(u**exponent, 0.0, 1.0)
        return u

    def _mouse_distance(self) -> int:
        if not self.gradient:
            return self.max_speed if self.state >= 0 else -self.max_speed
        abs_state = abs(self.state)
        if abs_state >= self.xzone:
            fdist = 1.0
        elif abs_state <= self.dzone:
            fdist = 0.0
        else:
            fdist = self._curve(self.inverse_range * (abs_state - self.dzone))
        fdist *= self.max_speed
        if self.state < 0:
            fdist = -fdist
        self.sum_dist += fdist
        dist = int(self.sum_dist)
        self.sum_dist -= dist
        return dist

    def _send_motion(self) -> None:
        dist = self._mouse_distance()
        sx, sy = _DIRECTIONS.get(self.mode, (0, 0))
        x, y = sx * dist, sy * dist
        if x or y:
            send_event(FakeEvent(EventType.MOUSE_MOVE, x=x, y=y))

    def _button_type(self, press: bool, mouse: bool) -> EventType:
        if press:
            return EventType.MOUSE_DOWN if mouse else EventType.KEY_DOWN
        return EventType.MOUSE_UP if mouse else EventType.KEY_UP

    def _move(self, press: bool) -> None:
        if self.mode is Mode.KEYBOARD:
            if self.is_down == press:
                return
            if self.state != 0:
                self.use_mouse = self.puse_mouse if self.state > 0 else self.nuse_mouse
            if press:
                self.downkey = self.pkeycode if self.state > 0 else self.nkeycode
            send_event(
                FakeEvent(self._button_type(press, self.use_mouse), keycode=self.downkey)
            )
            self.is_down = press
        elif self.mode in _KEY_MODES:
            mouse = self.puse_mouse if self.state > 0 else self.nuse_mouse
            if press and abs(self.state) >= self.xzone:
                if not self.is_down:
                    self.downkey = self.pkeycode if self.state > 0 else self.nkeycode
                    send_event(
                        FakeEvent(self._button_type(True, mouse), keycode=self.downkey)
                    )
                    self.is_down = True
            elif self.is_down:
                send_event(FakeEvent(self._button_type(False, mouse), keycode=self.downkey))
                self.is_down = False
            self._send_motion()
        elif self.mode in _MOUSE_MODES:
            self._send_motion()