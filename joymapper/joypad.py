"""A joystick device: its axes and buttons, its layout section and its events."""

from __future__ import annotations

import fcntl
import os
import struct
from dataclasses import dataclass
from typing import Callable, TextIO

from .axis import Axis
from .button import Button

JS_EVENT_BUTTON = 0x01
JS_EVENT_AXIS = 0x02
JS_EVENT_INIT = 0x80

_JS_EVENT_FORMAT = "@IhBB"
JS_EVENT_SIZE = struct.calcsize(_JS_EVENT_FORMAT)

_IOC_READ = 2


def _ioc_read(nr: int, size: int) -> int:
    return (_IOC_READ << 30) | (size << 16) | (ord("j") << 8) | nr


_JSIOCGAXES = _ioc_read(0x11, 1)
_JSIOCGBUTTONS = _ioc_read(0x12, 1)
_NAME_LENGTH = 256
_JSIOCGNAME = _ioc_read(0x13, _NAME_LENGTH)


class LayoutFileError(ValueError):
    """Raised when a layout file cannot be understood."""


@dataclass(frozen=True)
class JsEvent:
    """One event as reported by the joystick driver."""

    time: int
    value: int
    type: int
    number: int

    @classmethod
    def unpack(cls, data: bytes) -> "JsEvent":
        """Decode the driver's binary event record."""
        if len(data) != JS_EVENT_SIZE:
            raise ValueError(
                f"event record must be {JS_EVENT_SIZE} bytes, got {len(data)}"
            )
        return cls(*struct.unpack(_JS_EVENT_FORMAT, data))


# --- word-level reading of a layout text stream -----------------------------


def _skip_whitespace(stream: TextIO) -> None:
    while True:
        pos = stream.tell()
        ch = stream.read(1)
        if not ch or not ch.isspace():
            stream.seek(pos)
            return


def _read_word(stream: TextIO) -> str | None:
    _skip_whitespace(stream)
    chars: list[str] = []
    while True:
        pos = stream.tell()
        ch = stream.read(1)
        if not ch:
            break
        if ch.isspace():
            stream.seek(pos)
            break
        chars.append(ch)
    return "".join(chars) if chars else None


def _read_int(stream: TextIO) -> int:
    _skip_whitespace(stream)
    start = stream.tell()
    text = ""
    pos = stream.tell()
    ch = stream.read(1)
    if ch in ("+", "-") and ch:
        text = ch
    else:
        stream.seek(pos)
    digits = ""
    while True:
        pos = stream.tell()
        ch = stream.read(1)
        if not ch or not ch.isdigit():
            stream.seek(pos)
            break
        digits += ch
    if not digits:
        stream.seek(start)
        return 0
    return int(text + digits)


def _read_char(stream: TextIO) -> str:
    _skip_whitespace(stream)
    return stream.read(1)


def _read_line(stream: TextIO) -> str:
    return stream.readline().rstrip("\r\n")


def _ioctl_byte(fd: int, request: int) -> int:
    buf = bytearray(1)
    try:
        fcntl.ioctl(fd, request, buf, True)
    except OSError:
        return 0
    return buf[0]


class JoyPad:
    """A joystick device together with the mapping of its axes and buttons.

    ``listener``, when set and ``has_focus`` is true, receives every event
    instead of the axes and buttons (used while the pad is being edited).
    """

    def __init__(
        self,
        index: int,
        fd: int | None = None,
        on_load_layout: Callable[[str], None] | None = None,
    ) -> None:
        self.index = index
        self.fd: int | None = None
        self.device_id = ""
        self.on_load_layout = on_load_layout
        self.axes: list[Axis] = []
        self.buttons: list[Button] = []
        self.listener: Callable[[JsEvent], None] | None = None
        self.has_focus = True
        if fd is not None and fd >= 0:
            self.open(fd)

    @property
    def name(self) -> str:
        return f"Joystick {self.index + 1} ({self.device_id})"

    def _ensure_axes(self, count: int) -> None:
        self.axes.extend(Axis(i) for i in range(len(self.axes), count))

    def _ensure_buttons(self, count: int) -> None:
        self.buttons.extend(
            Button(i, self.on_load_layout) for i in range(len(self.buttons), count)
        )

    def open(self, fd: int) -> None:
        """Attach an open device descriptor and grow to its axis and button counts."""
        self.close()
        self.fd = fd
        name = bytearray(_NAME_LENGTH)
        try:
            fcntl.ioctl(fd, _JSIOCGNAME, name, True)
        except OSError:
            self.device_id = "Unknown"
        else:
            self.device_id = bytes(name).split(b"\0", 1)[0].decode(errors="replace")
        self._ensure_axes(_ioctl_byte(fd, _JSIOCGAXES))
        self._ensure_buttons(_ioctl_byte(fd, _JSIOCGBUTTONS))

    def close(self) -> None:
        """Close the device descriptor, if any."""
        if self.fd is not None:
            try:
                os.close(self.fd)
            except OSError:
                pass
            self.fd = None

    def read_config(self, stream: TextIO) -> None:
        """Read this joystick's section of a layout, up to its closing brace.

        The settings are reset first. Raises LayoutFileError on malformed input.
        """
        self.to_default()
        word = _read_word(stream)
        while word is not None and word != "}":
            keyword = word.lower()
            if keyword == "button":
                num = _read_int(stream)
                if num > 0:
                    ch = _read_char(stream)
                    if ch != ":":
                        raise LayoutFileError(f"Expected ':', found '{ch}'.")
                    self._ensure_buttons(num)
                    try:
                        self.buttons[num - 1].read(_read_line(stream))
                    except ValueError as exc:
                        raise LayoutFileError(f"Error reading Button {num}") from exc
                else:
                    _read_line(stream)
            elif keyword == "axis":
                num = _read_int(stream)
                if num > 0:
                    ch = _read_char(stream)
                    if ch != ":":
                        raise LayoutFileError(f"Expected ':', found '{ch}'.")
                    self._ensure_axes(num)
                    try:
                        self.axes[num - 1].read(_read_line(stream))
                    except ValueError as exc:
                        raise LayoutFileError(f"Error reading Axis {num}") from exc
            else:
                raise LayoutFileError(
                    f"Error while reading layout. Unrecognized word: {keyword}"
                )
            word = _read_word(stream)

    def write(self, stream: TextIO) -> None:
        """Write this joystick's layout section; only non-default parts appear."""
        if not self.axes and not self.buttons:
            return
        stream.write(f"Joystick {self.index + 1} {{\n")
        for axis in self.axes:
            if not axis.is_default():
                stream.write(axis.write())
        for button in self.buttons:
            if not button.is_default():
                stream.write(button.write())
        stream.write("}\n\n")

    def release(self) -> None:
        for axis in self.axes:
            axis.release()
        for button in self.buttons:
            button.release()

    def jsevent(self, msg: JsEvent) -> None:
        """Pass a device event on to the axis or button it concerns."""
        if self.listener is not None and self.has_focus:
            self.listener(msg)
            return
        kind = msg.type & ~JS_EVENT_INIT
        if kind == JS_EVENT_AXIS:
            if msg.number < len(self.axes):
                self.axes[msg.number].jsevent(msg.value)
        elif kind == JS_EVENT_BUTTON:
            if msg.number < len(self.buttons):
                self.buttons[msg.number].jsevent(msg.value)

    def to_default(self) -> None:
        for axis in self.axes:
            axis.to_default()
        for button in self.buttons:
            button.to_default()

    def is_default(self) -> bool:
        return all(axis.is_default() for axis in self.axes) and all(
            button.is_default() for button in self.buttons
        )

    def handle_joy_events(self) -> JsEvent | None:
        """Read one pending event from the device and handle it.

        Returns the event handled, or None if no complete event was waiting.
        """
        if self.fd is None:
            return None
        try:
            data = os.read(self.fd, JS_EVENT_SIZE)
        except (BlockingIOError, InterruptedError):
            return None
        if len(data) != JS_EVENT_SIZE:
            return None
        msg = JsEvent.unpack(data)
        self.jsevent(msg)
        return msg