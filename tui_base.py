from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from constants import UI
from surface import Region, Style


logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.FATAL: logging.CRITICAL,
}


@dataclass
class AppError:
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    recoverable: bool = True


@dataclass
class UIState:
    logs: deque = field(default_factory=lambda: deque(maxlen=UI.LOG_HISTORY))
    status_message: str | None = None
    status_since: float = 0.0
    status_timeout: float = UI.STATUS_TIMEOUT
    clock: Callable[[], float] = time.monotonic


def handle_error(error: AppError, ui_state: UIState | None = None) -> str:
    label = error.severity.value.upper()
    message = f"[{label}] {error.message}"
    logger.log(_LOG_LEVELS[error.severity], error.message)
    if ui_state is not None:
        append_log(ui_state, message)
    if error.severity == ErrorSeverity.FATAL and not error.recoverable:
        raise SystemExit(1)
    return message


def append_log(ui_state: UIState, message: str) -> None:
    if not message:
        return
    timestamp = time.strftime("%H:%M:%S")
    ui_state.logs.append(f"[{timestamp}] {message}")
    ui_state.status_message = message
    ui_state.status_since = ui_state.clock()


def current_status(ui_state: UIState) -> str:
    """Return the status line text, dropping it once it has been shown long enough."""
    if ui_state.status_message is None:
        return ""
    if ui_state.status_timeout > 0 and ui_state.clock() - ui_state.status_since >= ui_state.status_timeout:
        ui_state.status_message = None
        return ""
    return ui_state.status_message


def format_scroll_indicator(first_index: int, total: int, visible_rows: int) -> str:
    if total <= 0 or visible_rows <= 0:
        return ""
    if total <= visible_rows:
        return ""
    current = max(1, min(total, first_index + 1))
    return f"[{current}/{total}]"


def draw_scrollbar(
    region: Region,
    *,
    top: int,
    height: int,
    x: int,
    first_index: int,
    total: int,
    visible_rows: int,
    style: Style = Style.NORMAL,
) -> None:
    if total <= visible_rows or height <= 0:
        return
    max_scroll = max(1, total - visible_rows)
    track_height = max(1, height)
    thumb_pos = int((first_index / max_scroll) * (track_height - 1))
    for row in range(track_height):
        ch = "o" if row == thumb_pos else "|"
        region.write(top + row, x, ch, style)
