"""Small curses helpers shared by the views in this repo."""
from __future__ import annotations

from dataclasses import dataclass

from keybindings import KEYS, Key


@dataclass
class TextField:
    """Single-line edit buffer rendered inside a form.

    - Backspace/Delete: remove a character
    - Home/End: jump to line start/end
    - Ctrl+U: clear

    Keys are the values returned by :func:`surface.read_key`: function keys
    and Latin-1 characters as ints, wider characters as one-character strings.
    """

    width: int
    mask: str | None = None
    digits_only: bool = False
    max_length: int | None = None

    def __post_init__(self) -> None:
        self._buffer: list[str] = []
        self.cursor = 0
        self.scroll = 0

    @property
    def text(self) -> str:
        return "".join(self._buffer)

    def set_text(self, value: str) -> None:
        self._buffer = list(value or "")
        if self.max_length is not None:
            del self._buffer[self.max_length :]
        self.cursor = len(self._buffer)
        self.scroll = 0
        self._follow_cursor()

    def clear(self) -> None:
        self.set_text("")

    def accepts(self, ch: str) -> bool:
        if not ch.isprintable():
            return False
        if self.digits_only:
            return ch.isdigit()
        return True

    def _insert(self, ch: str) -> None:
        if not self.accepts(ch):
            return
        if self.max_length is not None and len(self._buffer) >= self.max_length:
            return
        self._buffer.insert(self.cursor, ch)
        self.cursor += 1

    def handle_key(self, key: Key) -> bool:
        """Apply an editing key; return True when the key belongs to the field."""
        if isinstance(key, str):
            if not key.isprintable():
                return False
            for ch in key:
                self._insert(ch)
        elif key in KEYS.BACKSPACE:
            if self.cursor > 0:
                self._buffer.pop(self.cursor - 1)
                self.cursor -= 1
        elif key in KEYS.DELETE:
            if self.cursor < len(self._buffer):
                self._buffer.pop(self.cursor)
        elif key in KEYS.HOME:
            self.cursor = 0
        elif key in KEYS.END:
            self.cursor = len(self._buffer)
        elif key in KEYS.CLEAR_LINE:
            self._buffer.clear()
            self.cursor = 0
            self.scroll = 0
        elif 0 <= key <= 255 and chr(key).isprintable():
            self._insert(chr(key))
        else:
            return False
        self._follow_cursor()
        return True

    def _follow_cursor(self) -> None:
        if self.cursor < self.scroll:
            self.scroll = self.cursor
        visible_capacity = max(1, self.width - 1)
        if self.cursor > self.scroll + visible_capacity:
            self.scroll = self.cursor - visible_capacity
        if self.scroll < 0:
            self.scroll = 0

    def display(self) -> str:
        visible = "".join(self._buffer[self.scroll : self.scroll + self.width])
        if self.mask:
            visible = self.mask * len(visible)
        return visible.ljust(self.width, "_")

    @property
    def cursor_column(self) -> int:
        return max(0, min(self.width - 1, self.cursor - self.scroll))
