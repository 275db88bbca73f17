"""Editor for the stored connection properties of one network.

The form keeps two optional text buffers, the password and the roaming
threshold, each shown and applied only while its toggle is on. A hidden
buffer keeps its text, so toggling back restores it. Buffers are not
validated while typing; :meth:`NetworkPropsForm.apply` parses them and
either returns the new :class:`ConnectionProperties` or raises
:class:`ValidationError` with focus moved onto the offending field.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Optional, Tuple

from constants import UI
from keybindings import KEYS, Key
from snm_types import ConnectionProperties
from surface import Region, Style
from tui_utils import TextField
from validators import MAX_THRESHOLD, validate_threshold


LABEL_COL = 2
VALUE_COL = 15
THRESHOLD_WIDTH = 4
HINT = "<- Cancel      Apply ->"


class FormField(IntEnum):
    AUTO_CONNECT = 0
    ENCRYPTION = 1
    PASSWORD = 2
    ROAMING = 3
    THRESHOLD = 4


TOGGLES = (FormField.AUTO_CONNECT, FormField.ENCRYPTION, FormField.ROAMING)


class ValidationError(ValueError):
    def __init__(self, field: FormField, message: str) -> None:
        super().__init__(message)
        self.field = field


class NetworkPropsForm:
    def __init__(self, region: Region) -> None:
        self.region = region
        _, width = region.size
        self.password = TextField(max(8, width - VALUE_COL - 2), mask=UI.PASSWORD_MASK)
        self.threshold = TextField(THRESHOLD_WIDTH, digits_only=True, max_length=len(str(MAX_THRESHOLD)))
        self.essid = ""
        self.properties = ConnectionProperties()
        self.auto_connect = False
        self.encryption = False
        self.roaming = False
        self.focus = FormField.AUTO_CONNECT

    def assign(self, essid: str, properties: ConnectionProperties) -> None:
        self.essid = essid
        self.properties = properties
        self.auto_connect = properties.auto_connect
        self.encryption = properties.encrypted
        self.roaming = properties.roaming
        self.password.set_text(properties.password or "")
        if properties.roaming_threshold is None:
            self.threshold.clear()
        else:
            self.threshold.set_text(str(abs(properties.roaming_threshold)))
        self.focus = FormField.AUTO_CONNECT

    def current_snapshot(self) -> Tuple[str, ConnectionProperties]:
        return self.essid, self.properties

    def is_visible(self, field: FormField) -> bool:
        if field == FormField.PASSWORD:
            return self.encryption
        if field == FormField.THRESHOLD:
            return self.roaming
        return True

    def move_focus(self, delta: int) -> None:
        idx = int(self.focus) + delta
        while 0 <= idx < len(FormField):
            if self.is_visible(FormField(idx)):
                self.focus = FormField(idx)
                return
            idx += delta

    def _ensure_focus_visible(self) -> None:
        # a dependent field always follows the toggle that governs it
        while not self.is_visible(self.focus):
            self.focus = FormField(int(self.focus) - 1)

    def toggle(self) -> None:
        if self.focus == FormField.AUTO_CONNECT:
            self.auto_connect = not self.auto_connect
        elif self.focus == FormField.ENCRYPTION:
            self.encryption = not self.encryption
        elif self.focus == FormField.ROAMING:
            self.roaming = not self.roaming
            if self.roaming and not self.threshold.text:
                self.threshold.set_text(str(UI.DEFAULT_THRESHOLD))
        self._ensure_focus_visible()

    def focused_text_field(self) -> Optional[TextField]:
        if self.focus == FormField.PASSWORD:
            return self.password
        if self.focus == FormField.THRESHOLD:
            return self.threshold
        return None

    def handle_key(self, key: Key) -> bool:
        if key in KEYS.NAV_UP:
            self.move_focus(-1)
            return True
        if key in KEYS.NAV_DOWN:
            self.move_focus(1)
            return True
        if key in KEYS.BACK or key in KEYS.FORWARD or key in KEYS.ESCAPE:
            return False
        field = self.focused_text_field()
        if key in KEYS.SPACE and field is None:
            self.toggle()
            return True
        if field is not None:
            return field.handle_key(key)
        return False

    def apply(self) -> ConnectionProperties:
        password = None
        if self.encryption:
            password = self.password.text.rstrip()
        threshold = None
        if self.roaming:
            result = validate_threshold(self.threshold.text)
            if not result.is_valid:
                self.focus = FormField.THRESHOLD
                raise ValidationError(FormField.THRESHOLD, result.error or "invalid value")
            threshold = result.value
        self.properties = ConnectionProperties(
            auto_connect=self.auto_connect,
            password=password,
            roaming_threshold=threshold,
        )
        return self.properties

    def cursor_position(self) -> Optional[Tuple[int, int]]:
        field = self.focused_text_field()
        if field is None:
            return None
        row = 5 if self.focus == FormField.PASSWORD else 7
        return row, VALUE_COL + field.cursor_column

    def _label_style(self, field: FormField) -> Style:
        return Style.TAGGED if self.focus == field else Style.NORMAL

    def render(self) -> None:
        region = self.region
        _, width = region.size
        region.erase()
        region.border()
        title = f"Settings for {self.essid or 'Ethernet connection'}"
        region.write(1, LABEL_COL, title[: max(1, width - 4)], Style.HEADING)
        region.write(3, LABEL_COL, f"auto connect [{'X' if self.auto_connect else ' '}]",
                     self._label_style(FormField.AUTO_CONNECT))
        region.write(4, LABEL_COL, f"encrypted    [{'X' if self.encryption else ' '}]",
                     self._label_style(FormField.ENCRYPTION))
        if self.encryption:
            region.write(5, LABEL_COL, "password", self._label_style(FormField.PASSWORD))
            region.write(5, VALUE_COL, self.password.display())
        region.write(6, LABEL_COL, f"roaming      [{'X' if self.roaming else ' '}]",
                     self._label_style(FormField.ROAMING))
        if self.roaming:
            region.write(7, LABEL_COL, "threshold", self._label_style(FormField.THRESHOLD))
            region.write(7, VALUE_COL - 1, "-" + self.threshold.display())
        region.write(9, max(1, (width - len(HINT)) // 2), HINT)
