import pytest

from joymapper.event import EventType, FakeEvent, RecordingSink, send_event, set_sink


@pytest.fixture
def sink():
    recorder = RecordingSink()
    previous = set_sink(recorder)
    yield recorder
    set_sink(previous)


def test_key_down_is_delivered(sink):
    event = FakeEvent(EventType.KEY_DOWN, keycode=38)
    assert send_event(event) == event
    assert sink.events == [event]


@pytest.mark.parametrize(
    "etype",
    [EventType.KEY_UP, EventType.KEY_DOWN, EventType.MOUSE_UP, EventType.MOUSE_DOWN],
)
def test_zero_keycode_is_dropped(sink, etype):
    assert send_event(FakeEvent(etype, keycode=0)) is None
    assert sink.events == []


def test_zero_motion_is_dropped(sink):
    assert send_event(FakeEvent(EventType.MOUSE_MOVE)) is None
    assert sink.events == []


def test_relative_motion_is_delivered(sink):
    event = FakeEvent(EventType.MOUSE_MOVE, x=-3, y=7)
    send_event(event)
    assert sink.events == [event]


def test_absolute_motion_remembers_axes(sink):
    first = send_event(FakeEvent(EventType.MOUSE_MOVE_ABSOLUTE, x=10, y=20))
    second = send_event(FakeEvent(EventType.MOUSE_MOVE_ABSOLUTE, x=0, y=-5))
    assert (first.x, first.y) == (10, 20)
    assert (second.x, second.y) == (10, -5)
    assert [(e.x, e.y) for e in sink.events] == [(10, 20), (10, -5)]


def test_set_sink_returns_previous(sink):
    other = RecordingSink()
    assert set_sink(other) is sink
    assert set_sink(sink) is other


def test_no_sink_still_filters():
    previous = set_sink(None)
    try:
        event = FakeEvent(EventType.MOUSE_DOWN, keycode=1)
        assert send_event(event) == event
        assert send_event(FakeEvent(EventType.MOUSE_DOWN)) is None
    finally:
        set_sink(previous)