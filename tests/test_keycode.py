import pytest

from joymapper.constants import MAXKEY
from joymapper.keycode import ktos, mouse_button_code, pretty_key_name, wheel_code


@pytest.mark.parametrize(
    "xname, expected",
    [
        ("a", "A"),
        ("7", "7"),
        ("Control_R", "R Control"),
        ("Shift_L", "L Shift"),
        ("Caps_Lock", "Caps Lock"),
        ("KP_Enter", "KP Enter"),
        ("KP_Home", "KP 7"),
        ("KP_Divide", "KP /"),
        ("ISO_Level3_Shift", "ISO_Level3_Shift"),
        ("minus", "-"),
        ("backslash", "\\"),
        ("space", "Space"),
        ("Prior", "PageUp"),
        ("Next", "PageDown"),
        ("Escape", "Escape"),
    ],
)
def test_pretty_key_name(xname, expected):
    assert pretty_key_name(xname) == expected


@pytest.mark.parametrize("code", [0, -1, MAXKEY + 1])
def test_ktos_out_of_range_is_no_key(code):
    calls = []
    assert ktos(code, lambda k: calls.append(k) or "a") == "[NO KEY]"
    assert calls == []


def test_ktos_uses_lookup_and_prettifies():
    seen = []

    def lookup(code):
        seen.append(code)
        return "Control_L"

    assert ktos(37, lookup) == "L Control"
    assert seen == [37]


def test_ktos_max_key_is_looked_up():
    assert ktos(MAXKEY, lambda k: "q") == "Q"


@pytest.mark.parametrize(
    "button, code", [("left", 1), ("middle", 2), ("right", 3), ("back", 0)]
)
def test_mouse_button_code(button, code):
    assert mouse_button_code(button) == code


@pytest.mark.parametrize(
    "dx, dy, code", [(0, -120, 4), (0, 120, 5), (-120, 0, 6), (120, 0, 7), (50, -50, 4)]
)
def test_wheel_code(dx, dy, code):
    assert wheel_code(dx, dy) == code


def test_wheel_code_without_motion():
    assert wheel_code(0, 0) is None