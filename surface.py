"""Thin curses layer: a fixed style palette and stacked, bordered regions."""
from __future__ import annotations

import curses
import curses.panel
from enum import Enum, IntEnum
from typing import Optional

from keybindings import Key


class Style(IntEnum):
    NORMAL = 0
    SELECTED = 1
    TAGGED = 2
    SELECTED_TAGGED = 3
    HEADING = 4


class Anchor(Enum):
    CENTER = "center"
    BOTTOM = "bottom"


_FALLBACK_ATTRS = {
    Style.NORMAL: curses.A_NORMAL,
    Style.SELECTED: curses.A_REVERSE,
    Style.TAGGED: curses.A_BOLD,
    Style.SELECTED_TAGGED: curses.A_REVERSE | curses.A_BOLD,
    Style.HEADING: curses.A_BOLD,
}

_colors_ready = False


def init_palette() -> None:
    global _colors_ready
    if not curses.has_colors():
        return
    curses.start_color()
    curses.init_pair(Style.SELECTED, curses.COLOR_BLACK, curses.COLOR_WHITE)
    curses.init_pair(Style.TAGGED, curses.COLOR_GREEN, curses.COLOR_BLACK)
    curses.init_pair(Style.SELECTED_TAGGED, curses.COLOR_BLACK, curses.COLOR_GREEN)
    curses.init_pair(Style.HEADING, curses.COLOR_RED, curses.COLOR_BLACK)
    _colors_ready = True


def style_attr(style: Style) -> int:
    if style == Style.NORMAL:
        return curses.A_NORMAL
    if not _colors_ready:
        return _FALLBACK_ATTRS[style]
    return curses.color_pair(int(style))


def set_cursor_visible(visible: bool) -> None:
    try:
        curses.curs_set(1 if visible else 0)
    except curses.error:
        pass


def commit() -> None:
    curses.panel.update_panels()
    curses.doupdate()


def read_key(window) -> Optional[Key]:
    """Wait for one key on ``window``; None when its input timeout expires.

    Characters are decoded by curses from the locale, so multi-byte input
    arrives whole. Anything that fits in Latin-1 is returned as its code
    point to line up with the int tuples in ``KEYS``.
    """
    try:
        key = window.get_wch()
    except curses.error:
        return None
    if isinstance(key, str) and len(key) == 1 and ord(key) < 256:
        return ord(key)
    return key


class Region:
    """A bordered window that lives on the panel stack."""

    def __init__(self, height: int, width: int, *, anchor: Anchor = Anchor.CENTER) -> None:
        self._requested = (height, width)
        self._anchor = anchor
        h, w, y, x = self._geometry()
        self.win = curses.newwin(h, w, y, x)
        self.win.keypad(True)
        self.panel = curses.panel.new_panel(self.win)

    def _geometry(self) -> tuple[int, int, int, int]:
        lines, cols = curses.LINES, curses.COLS
        height, width = self._requested
        if self._anchor == Anchor.BOTTOM:
            h = max(1, min(height, lines))
            w = max(1, cols if width <= 0 else min(width, cols))
            return h, w, max(0, lines - h), 0
        h = max(3, min(height, lines - 1))
        w = max(10, min(width, cols))
        return h, w, max(0, (lines - 1 - h) // 2), max(0, (cols - w) // 2)

    @property
    def size(self) -> tuple[int, int]:
        return self.win.getmaxyx()

    def relayout(self) -> None:
        curses.update_lines_cols()
        h, w, y, x = self._geometry()
        try:
            self.win.resize(h, w)
            self.panel.move(y, x)
        except curses.error:
            pass

    def erase(self) -> None:
        self.win.erase()

    def border(self) -> None:
        self.win.box()

    def write(self, row: int, col: int, text: str, style: Style = Style.NORMAL) -> None:
        height, width = self.size
        if row < 0 or row >= height or col < 0 or col >= width:
            return
        room = width - col
        if room <= 0 or not text:
            return
        try:
            self.win.addnstr(row, col, text, room, style_attr(style))
        except curses.error:
            # the bottom-right cell cannot be written without scrolling
            pass

    def place_cursor(self, row: int, col: int) -> None:
        try:
            self.win.move(row, col)
        except curses.error:
            pass

    def raise_to_front(self) -> None:
        self.panel.top()
