[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "joymapper"
version = "4.3.0"
description = "Map joystick and gamepad input to keyboard keys, mouse buttons and mouse movement"
requires-python = ">=3.10"
dependencies = []
keywords = ["joystick", "gamepad", "joypad", "input", "keyboard", "mouse", "mapping", "layout"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["joymapper"]

[tool.pytest.ini_options]
addopts = "-ra"
