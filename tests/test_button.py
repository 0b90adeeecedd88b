import pytest

from joymapper.button import Button
from joymapper.constants import FREQ
from joymapper.event import EventType, RecordingSink, set_sink


@pytest.fixture
def sink():
    recorder = RecordingSink()
    previous = set_sink(recorder)
    yield recorder
    set_sink(previous)


def types(sink):
    return [e.type for e in sink.events]


def test_new_button_is_default():
    button = Button(0)
    assert button.is_default()
    assert button.status() == "Button 1 : [NO KEY]"


def test_read_key():
    button = Button(2)
    button.read(" key 38")
    assert (button.use_mouse, button.keycode) == (False, 38)
    assert not button.is_default()


def test_read_flags_and_mouse():
    button = Button(0)
    button.read(" RapidFire, Sticky, Mouse 3")
    assert button.rapidfire and button.sticky and button.use_mouse
    assert button.keycode == 3


def test_read_layout_unescapes_spaces():
    button = Button(0)
    button.read(" key 0 layout my\\sgame")
    assert button.has_layout
    assert button.layout == "my game"
    assert button.status() == "Button 1 : my game"


@pytest.mark.parametrize("line", ["key", "key 256", "mouse -1", "key abc", "layout"])
def test_read_rejects_bad_values(line):
    with pytest.raises(ValueError):
        Button(0).read(line)


def test_write_plain_key():
    button = Button(0)
    button.set_key(False, 5)
    assert button.write() == "\tButton 1: key 5\n"


def test_write_read_round_trip():
    original = Button(4)
    original.read(" rapidfire, sticky, mouse 2 layout two\\swords")
    line = original.write()
    assert line.startswith("\tButton 5: ")
    copy = Button(4)
    copy.read(line.split(":", 1)[1].rstrip("\n"))
    attrs = ("rapidfire", "sticky", "use_mouse", "keycode", "has_layout", "layout")
    assert [getattr(copy, a) for a in attrs] == [getattr(original, a) for a in attrs]
    assert copy.write() == line


def test_to_default_resets():
    button = Button(0)
    button.read(" rapidfire, sticky, mouse 2 layout x")
    button.to_default()
    assert button.is_default()


def test_status_mouse_and_key():
    button = Button(0)
    button.set_key(True, 3)
    assert button.status() == "Button 1 : Mouse 3"
    button.set_key(False, 38)
    assert button.status(lambda code: "a") == "Button 1 : A"


def test_press_and_release_sends_key_events(sink):
    button = Button(0)
    button.set_key(False, 38)
    button.jsevent(1)
    button.jsevent(1)
    button.jsevent(0)
    assert types(sink) == [EventType.KEY_DOWN, EventType.KEY_UP]
    assert all(e.keycode == 38 for e in sink.events)


def test_mouse_button_events(sink):
    button = Button(0)
    button.set_key(True, 1)
    button.jsevent(1)
    button.jsevent(0)
    assert types(sink) == [EventType.MOUSE_DOWN, EventType.MOUSE_UP]


def test_sticky_toggles_on_press_only(sink):
    button = Button(0)
    button.read(" sticky key 10")
    button.jsevent(1)
    button.jsevent(0)
    assert types(sink) == [EventType.KEY_DOWN]
    button.jsevent(1)
    button.jsevent(0)
    assert types(sink) == [EventType.KEY_DOWN, EventType.KEY_UP]


def test_rapidfire_cycles_with_timer(sink):
    button = Button(0)
    button.read(" rapidfire key 10")
    button.jsevent(1)
    assert button.timer_active
    assert sink.events == []
    for _ in range(FREQ):
        button.timer_called()
    assert types(sink) == [EventType.KEY_DOWN]
    for _ in range(FREQ // 2):
        button.timer_called()
    assert types(sink) == [EventType.KEY_DOWN, EventType.KEY_UP]


def test_rapidfire_release_stops_timer_and_releases(sink):
    button = Button(0)
    button.read(" rapidfire key 10")
    button.jsevent(1)
    for _ in range(FREQ):
        button.timer_called()
    button.jsevent(0)
    assert not button.timer_active
    assert button.tick == 0
    assert types(sink) == [EventType.KEY_DOWN, EventType.KEY_UP]


def test_release_lets_go_of_held_key(sink):
    button = Button(0)
    button.set_key(False, 10)
    button.jsevent(1)
    button.release()
    button.release()
    assert types(sink) == [EventType.KEY_DOWN, EventType.KEY_UP]
    assert not button.is_down


def test_layout_button_requests_layout_once(sink):
    requested = []
    button = Button(0, on_load_layout=requested.append)
    button.read(" key 0 layout racing")
    button.jsevent(1)
    button.jsevent(1)
    button.jsevent(0)
    button.jsevent(1)
    assert requested == ["racing", "racing"]
    assert sink.events == []