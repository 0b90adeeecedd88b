"""Loading, saving and switching of named layouts kept in a settings directory."""

from __future__ import annotations

import io
import os
import shutil
from pathlib import Path
from typing import Callable, NoReturn

from .joypad import JoyPad, LayoutFileError, _read_char, _read_line, _read_word

LAYOUT_SUFFIX = ".lyt"
LAST_LAYOUT_FILE = "layout"
FILE_HEADER = "# Joymapper Layout File\n\n"


class LayoutError(Exception):
    """Raised when a layout cannot be loaded, saved, renamed or removed."""


def _check_name(name: str) -> None:
    if not name:
        raise LayoutError("Layout name cannot be empty.")
    if "/" in name:
        raise LayoutError("Layout name may not contain a '/' (slash).")


class LayoutManager:
    """Keeps the joypads' settings in step with layout files on disk.

    ``joypads`` maps a device index to its JoyPad. ``current_layout`` is the
    name of the loaded layout, or None when no layout is loaded.
    ``on_layout_changed`` is called with the new name whenever it changes.
    """

    def __init__(
        self,
        settings_dir: str | os.PathLike[str],
        joypads: dict[int, JoyPad] | None = None,
        on_layout_changed: Callable[[str | None], None] | None = None,
    ) -> None:
        self.settings_dir = Path(settings_dir)
        self.joypads: dict[int, JoyPad] = joypads if joypads is not None else {}
        self.on_layout_changed = on_layout_changed
        self.current_layout: str | None = None

    def file_name(self, name: str) -> Path:
        """Path of the file holding the layout called ``name``."""
        return self.settings_dir / f"{name}{LAYOUT_SUFFIX}"

    def _set_layout_name(self, name: str | None) -> None:
        self.current_layout = name
        if self.on_layout_changed is not None:
            self.on_layout_changed(name)

    def _reset_joypads(self) -> None:
        for joypad in self.joypads.values():
            joypad.to_default()

    def _abort(
        self, name: str, message: str, cause: BaseException | None = None
    ) -> NoReturn:
        # Fall back to the previous layout, or to none if that was the one failing.
        if name != self.current_layout:
            try:
                self.reload()
            except LayoutError:
                pass
        else:
            self.clear()
        raise LayoutError(message) from cause

    def load(self, name: str | None) -> None:
        """Load the named layout; None loads the empty layout.

        On a malformed file the previous layout is restored and LayoutError raised.
        """
        if name is None:
            self.clear()
            return
        path = self.file_name(name)
        if not path.exists():
            raise LayoutError(f"Failed to find a layout named {name}.")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LayoutError(f"Error reading from file: {path}") from exc

        self._reset_joypads()
        stream = io.StringIO(text)
        while True:
            word = _read_word(stream)
            if word is None:
                break
            if word.lower() == "joystick":
                token = _read_word(stream) or ""
                try:
                    num = int(token)
                except ValueError:
                    num = 0
                if num < 1:
                    self._abort(
                        name,
                        "Error reading joystick definition. Unexpected token "
                        f'"{token}". Expected a positive number.',
                    )
                ch = _read_char(stream)
                if ch != "{":
                    self._abort(
                        name,
                        "Error reading joystick definition. Unexpected character "
                        f"\"{ch}\". Expected '{{'.",
                    )
                index = num - 1
                joypad = self.joypads.get(index)
                if joypad is None:
                    joypad = JoyPad(index)
                    self.joypads[index] = joypad
                try:
                    joypad.read_config(stream)
                except LayoutFileError as exc:
                    self._abort(
                        name,
                        f"Error reading definition for joystick {index}: {exc}",
                        exc,
                    )
            elif word.startswith("#"):
                _read_line(stream)
            else:
                self._abort(
                    name,
                    "Error reading joystick definition. Unexpected token "
                    f'"{word}". Expected "Joystick".',
                )
        self._set_layout_name(name)

    def load_last(self) -> bool:
        """Load the layout recorded by ``save_default``.

        Returns False if no layout was recorded; raises LayoutError if it fails to load.
        """
        try:
            with open(self.settings_dir / LAST_LAYOUT_FILE, encoding="utf-8") as file:
                name = file.readline().rstrip("\r\n")
        except OSError:
            return False
        if not name:
            return False
        self.load(name)
        return True

    def reload(self) -> None:
        """Load the current layout again, discarding unsaved changes."""
        self.load(self.current_layout)

    def clear(self) -> None:
        """Reset every joypad and switch to the empty layout."""
        self._reset_joypads()
        self._set_layout_name(None)

    def save(self, filename: str | os.PathLike[str] | None = None) -> None:
        """Write the joypads' settings to ``filename``, or to the current layout's file."""
        if filename is None:
            if self.current_layout is None:
                raise LayoutError("No layout is loaded; give the layout a name first.")
            filename = self.file_name(self.current_layout)
        try:
            with open(filename, "w", encoding="utf-8") as stream:
                stream.write(FILE_HEADER)
                for joypad in self.joypads.values():
                    joypad.write(stream)
        except OSError as exc:
            raise LayoutError(
                f"Could not open file {filename}, layout not saved."
            ) from exc

    def save_as(self, name: str) -> None:
        """Save the settings as a new layout and make it the current one."""
        _check_name(name)
        path = self.file_name(name)
        if path.exists():
            raise LayoutError("That name's already taken!")
        self._set_layout_name(name)
        self.save(path)

    def import_layout(
        self, source: str | os.PathLike[str], overwrite: bool = False
    ) -> str:
        """Copy a layout file into the settings directory and load it.

        Returns the name the layout was imported under.
        """
        source_path = Path(source)
        name = source_path.name.split(".", 1)[0]
        if name.lower().endswith(LAYOUT_SUFFIX):
            name = name[: -len(LAYOUT_SUFFIX)]
        target = self.file_name(name)
        if source_path.resolve() == target.resolve():
            raise LayoutError("Cannot import file from the settings directory.")
        if target.exists():
            if not overwrite:
                raise LayoutError(f'Layout "{name}" exists.')
            target.unlink()
        try:
            shutil.copyfile(source_path, target)
        except OSError as exc:
            raise LayoutError(f"Could not import {source_path}.") from exc
        self.load(name)
        return name

    def export_layout(self, path: str | os.PathLike[str]) -> None:
        """Write the current settings to an arbitrary file."""
        self.save(path)

    def save_default(self) -> None:
        """Record the current layout name so ``load_last`` can restore it."""
        try:
            with open(self.settings_dir / LAST_LAYOUT_FILE, "w", encoding="utf-8") as f:
                f.write(self.current_layout or "")
        except OSError:
            pass

    def remove(self) -> None:
        """Delete the current layout's file and switch to the empty layout."""
        if self.current_layout is None:
            return
        path = self.file_name(self.current_layout)
        try:
            path.unlink()
        except OSError as exc:
            self.clear()
            raise LayoutError(f"Could not remove file {path}") from exc
        self.clear()

    def rename(self, name: str) -> None:
        """Give the current layout a new name and load it under that name."""
        if self.current_layout is None:
            return
        _check_name(name)
        target = self.file_name(name)
        if target.exists():
            raise LayoutError(f"Layout with name {name} already exists.")
        try:
            self.file_name(self.current_layout).rename(target)
        except OSError as exc:
            raise LayoutError("Error renaming layout.") from exc
        self.load(name)

    def layout_names(self) -> list[str]:
        """Names of all layouts in the settings directory, sorted by name."""
        try:
            entries = list(self.settings_dir.iterdir())
        except OSError:
            return []
        names = [
            entry.name[: -len(LAYOUT_SUFFIX)]
            for entry in entries
            if entry.name.endswith(LAYOUT_SUFFIX) and entry.is_file()
        ]
        return sorted(names, key=lambda n: (n.lower(), n))