# joymapper

joymapper is a library that turns joystick and gamepad input into keyboard
presses, mouse button clicks and mouse movement. The mapping for every
joystick is kept in a named *layout*, stored as a plain-text file. A button
can also be set to switch to a different layout when it is pressed.

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Layout files

Each layout is a `.lyt` file in a settings directory. A layout holds one
block per joystick. Inside a block, each line describes one axis or one
button. Lines that start with `#` outside a block are comments.

```
# Joymapper Layout File

Joystick 1 {
Axis 1: Gradient, dZone 3000, xZone 30000, maxSpeed 100, tCurve 1, mouse+h
Axis 2: ZeroOne, +key 116, -key 111
	Button 1: rapidfire, key 36
	Button 2: mouse 1
	Button 3: key 0 layout racing\sgame
}
```

Axis settings (upper or lower case):

- `ZeroOne`, `Gradient` or `Absolute`: how the axis position is interpreted.
- `dZone` and `xZone`: the dead zone and the extreme zone, from 0 to 32767.
- `maxSpeed`: the top speed of mouse movement, from 0 to 5000.
- `tCurve`: the transfer curve. 0 is linear, 1 quadratic, 2 cubic,
  3 quadratic extreme and 4 a power function. `sens` sets the sensitivity
  used by the power function.
- `+key` / `-key`: the key codes (0 to 255) sent in the positive and negative
  directions. `+mouse` / `-mouse` send mouse buttons instead.
- `throttle+` / `throttle-`: treat the axis as a one-way throttle.
- A mode: one of the mouse modes `mouse+v`, `mouse-v`, `mouse+h`, `mouse-h`,
  or one of the combined key-and-mouse modes `keyboardandmousehor`,
  `keyboardandmousevert`, `keyboardandmousehorrev`,
  `keyboardandmousevertrev`. Without a mode the axis sends keys.

Words that are not recognised on an axis line are ignored. When an axis is
written back, the mouse modes are written as `mouseposvert`, `mousenegvert`,
`mouseposhor`, `mouseneghor` and the key mode as `keyboard`; those names are
not read back as modes, so edit such lines to use `mouse+v` and so on.

Button settings:

- `key N` or `mouse N`: the key code or mouse button to send (0 to 255).
- `rapidfire`: press and release repeatedly for as long as the button is held.
- `sticky`: each press toggles the key between held and released.
- `layout NAME`: switch to another layout when the button is pressed. Write
  spaces in the name as `\s`.

When a layout is saved, only axes and buttons whose settings differ from the
defaults are written.

## Using it from Python

```python
from joymapper.event import RecordingSink, set_sink
from joymapper.joypad import JoyPad, JsEvent, JS_EVENT_BUTTON
from joymapper.layout import LayoutManager

sink = RecordingSink()
set_sink(sink)

pad = JoyPad(0)
manager = LayoutManager("/path/to/settings", {0: pad})
manager.load("my layout")

pad.jsevent(JsEvent(time=0, value=1, type=JS_EVENT_BUTTON, number=0))
print(sink.events)
```

The modules:

- `joymapper.layout`: `LayoutManager` loads, reloads, clears, saves,
  saves under a new name (`save_as`), renames, removes, imports and exports
  layouts, lists them (`layout_names`), and remembers the last one used
  (`save_default` / `load_last`). Problems are raised as `LayoutError`; a
  layout that fails to load falls back to the previous one.
- `joymapper.joypad`: `JoyPad` holds the `Axis` and `Button` objects of one
  device. It reads and writes that device's block of a layout
  (`read_config` raises `LayoutFileError`), and passes each `JsEvent` on to
  the right axis or button. Given an open joystick device descriptor
  (`open`), it takes the device name and axis and button counts from the
  driver, and `handle_joy_events` reads and handles one pending event.
  `JsEvent.unpack` decodes the driver's binary event record.
- `joymapper.axis` and `joymapper.button`: `Axis` and `Button` turn raw
  device values into `FakeEvent`s. For rapid fire and gradient axes they set
  `timer_active`; while it is set, call `timer_called` every 5 milliseconds.
- `joymapper.event`: `send_event` drops events that would have no effect and
  delivers the rest to the sink installed with `set_sink`. `RecordingSink`
  keeps every event in a list.
- `joymapper.keycode`: `ktos` gives a display name for a key code, by default
  asking `xmodmap` for the X key map; `pretty_key_name` shortens X keysym
  names; `mouse_button_code` and `wheel_code` give X button numbers.

## What it does not do

joymapper is a library only. It has no command to run, no tray icon and no
editing window, and it does not find joystick devices or watch for them
being plugged in: open the device yourself and hand the descriptor to
`JoyPad`. It does not inject events into the X server either; events go to
whatever sink you install with `set_sink`, and with no sink they go nowhere.