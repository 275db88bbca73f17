from __future__ import annotations

import curses
from dataclasses import dataclass
from typing import Union

# what surface.read_key hands out: an int code, or a character above Latin-1
Key = Union[int, str]


@dataclass(frozen=True)
class Keybindings:
    QUIT = (ord("q"), ord("Q"))
    ESCAPE = (27,)
    CONNECT = (ord("c"), ord("C"))
    DISCONNECT = (ord("d"), ord("D"))
    PROPERTIES = (ord("p"), ord("P"))
    SPACE = (ord(" "),)
    ENTER = (curses.KEY_ENTER, ord("\n"), ord("\r"))
    BACKSPACE = (curses.KEY_BACKSPACE, 127, 8)
    DELETE = (curses.KEY_DC,)
    CLEAR_LINE = (21,)  # Ctrl+U
    RESIZE = (curses.KEY_RESIZE,)

    NAV_UP = (curses.KEY_UP,)
    NAV_DOWN = (curses.KEY_DOWN,)
    NAV_LEFT = (curses.KEY_LEFT,)
    NAV_RIGHT = (curses.KEY_RIGHT,)

    PAGE_UP = (curses.KEY_PPAGE,)
    PAGE_DOWN = (curses.KEY_NPAGE,)
    HOME = (curses.KEY_HOME,)
    END = (curses.KEY_END,)

    BACK = NAV_LEFT
    FORWARD = NAV_RIGHT + ENTER


KEYS = Keybindings()
