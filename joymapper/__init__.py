"""Map joystick and gamepad input to key, mouse-button and pointer events, with layouts stored as files."""

__version__ = "4.3.0"