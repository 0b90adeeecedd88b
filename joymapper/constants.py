"""Numeric limits and timing constants shared by the mapping code."""

# Timer cycles per simulated click.
FREQ = 10

# Milliseconds per timer cycle.
MSEC = 5

# Range of values reported by the joystick driver.
JOYMAX = 32767
JOYMIN = -32767

# Highest key or mouse-button code that may be assigned.
MAXKEY = 255

# Fastest the mouse pointer may be driven.
MAXMOUSESPEED = 5000

SENSITIVITY_MIN = 1e-8
SENSITIVITY_MAX = 1e8