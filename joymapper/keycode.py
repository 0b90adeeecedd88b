"""Key names for X key codes, and codes for mouse buttons and wheel motion."""

from __future__ import annotations

import functools
import re
import subprocess
from typing import Callable

from .constants import MAXKEY

NO_KEY = "[NO KEY]"

_KEYPAD_NAMES = {
    "KP_Home": "KP 7",
    "KP_Up": "KP 8",
    "KP_Prior": "KP 9",
    "KP_Subtract": "KP -",
    "KP_Left": "KP 4",
    "KP_Begin": "KP 5",
    "KP_Right": "KP 6",
    "KP_Add": "KP +",
    "KP_End": "KP 1",
    "KP_Down": "KP 2",
    "KP_Next": "KP 3",
    "KP_Insert": "KP 0",
    "KP_Delete": "KP .",
    "KP_Multiply": "KP *",
    "KP_Divide": "KP /",
}

_SYMBOL_NAMES = {
    "minus": "-",
    "equal": "=",
    "bracketleft": "[",
    "bracketright": "]",
    "semicolon": ";",
    "apostrophe": "'",
    "grave": "`",
    "backslash": "\\",
    "comma": ",",
    "period": ".",
    "slash": "/",
    "space": "Space",
    "Prior": "PageUp",
    "Next": "PageDown",
}

_MOUSE_BUTTONS = {"left": 1, "middle": 2, "right": 3}


def pretty_key_name(xname: str) -> str:
    """Turn an X keysym name into a shorter, friendlier label."""
    if re.fullmatch(r"\w", xname):
        return xname.upper()

    split = re.fullmatch(r"(.*)_(.*)", xname)
    if split:
        first, second = split.groups()
        if re.fullmatch(r"[RL]", second):
            return f"{second} {first}"
        if re.fullmatch(r"Lock|Enter", second):
            return f"{first} {second}"
        return _KEYPAD_NAMES.get(xname, xname)

    return _SYMBOL_NAMES.get(xname, xname)


@functools.lru_cache(maxsize=1)
def _x_keymap() -> dict[int, str]:
    try:
        result = subprocess.run(
            ["xmodmap", "-pke"], capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return {}
    keymap: dict[int, str] = {}
    for line in result.stdout.splitlines():
        match = re.match(r"\s*keycode\s+(\d+)\s*=\s*(\S*)", line)
        if match and match.group(2):
            keymap[int(match.group(1))] = match.group(2)
    return keymap


def _x_keysym_name(keycode: int) -> str:
    return _x_keymap().get(keycode, "")


def ktos(keycode: int, lookup: Callable[[int], str] | None = None) -> str:
    """Return a display name for an X key code.

    ``lookup`` maps a key code to its keysym name; by default the running
    X server's key map is consulted.
    """
    if keycode > MAXKEY or keycode < 0:
        keycode = 0
    if keycode == 0:
        return NO_KEY
    xname = (lookup or _x_keysym_name)(keycode)
    return pretty_key_name(xname)


def mouse_button_code(button: str) -> int:
    """X button number for 'left', 'middle' or 'right'; 0 for anything else."""
    return _MOUSE_BUTTONS.get(button.lower(), 0)


def wheel_code(dx: int, dy: int) -> int | None:
    """X button number for a wheel step, or None if there was no motion."""
    if dy:
        return 4 if dy < 0 else 5
    if dx:
        return 6 if dx < 0 else 7
    return None