"""Scrollable list of discovered networks with a highlighted active row."""
from __future__ import annotations

from typing import List, Optional, Sequence

from constants import COLUMNS
from keybindings import KEYS, Key
from snm_types import (
    ActiveConnectionState,
    ConnectionIdentity,
    ConnectionStatus,
    NetworkEntry,
    unique_networks,
)
from surface import Region, Style
from tui_base import draw_scrollbar, format_scroll_indicator


EMPTY_MESSAGE = "No networks found."

# border + header row + border
_CHROME_ROWS = 3


def row_style(selected: bool, active: bool) -> Style:
    if selected and active:
        return Style.SELECTED_TAGGED
    if selected:
        return Style.SELECTED
    if active:
        return Style.TAGGED
    return Style.NORMAL


def window_start(selected: int, count: int, page: int) -> int:
    """First visible index: centre on the selection, never past either end."""
    page = max(1, page)
    upper = max(count - page, 0)
    return max(0, min(selected - page // 2, upper))


class NetworkListView:
    def __init__(self, region: Region) -> None:
        self.region = region
        self.networks: List[NetworkEntry] = []
        self.selected = -1
        self.top = 0
        self.active = -1
        self.state = ActiveConnectionState.disconnected()
        self.status: Optional[ConnectionStatus] = None

    @property
    def page_size(self) -> int:
        height, _ = self.region.size
        return max(1, height - _CHROME_ROWS)

    def replace(self, networks: Sequence[NetworkEntry]) -> None:
        self.networks = unique_networks(networks)
        self._update()

    def set_active_state(self, state: ActiveConnectionState, status: Optional[ConnectionStatus]) -> None:
        self.state = state
        self.status = status
        self._update()

    def move_selection(self, delta: int) -> None:
        if not self.networks:
            return
        self.selected += delta
        self._update()

    def selected_network(self) -> Optional[NetworkEntry]:
        if self.selected < 0:
            return None
        return self.networks[self.selected]

    def selected_identity(self) -> Optional[ConnectionIdentity]:
        network = self.selected_network()
        if network is None:
            return None
        return ConnectionIdentity.from_entry(network)

    def _find_active(self) -> int:
        if not self.state.is_active:
            return -1
        for idx, network in enumerate(self.networks):
            if self.state.matches(network):
                return idx
        return -1

    def _update(self) -> None:
        count = len(self.networks)
        self.active = self._find_active()
        if count:
            self.selected = max(0, min(self.selected, count - 1))
        else:
            self.selected = -1
        self.top = window_start(self.selected, count, self.page_size)

    def handle_key(self, key: Key) -> bool:
        page = self.page_size
        if key in KEYS.NAV_DOWN:
            self.move_selection(1)
        elif key in KEYS.NAV_UP:
            self.move_selection(-1)
        elif key in KEYS.PAGE_DOWN:
            self.move_selection(page)
        elif key in KEYS.PAGE_UP:
            self.move_selection(-page)
        elif key in KEYS.HOME:
            self.move_selection(-len(self.networks))
        elif key in KEYS.END:
            self.move_selection(len(self.networks))
        else:
            return False
        return True

    def row_text(self, index: int, essid_width: int) -> str:
        network = self.networks[index]
        label = self.state.describe(self.status) if index == self.active else network.essid
        label = label[:essid_width]
        marker = "> " if index == self.selected else "  "
        secure = "secured" if network.encrypted else "open"
        return (
            f"{marker}{network.kind.short_label:>{COLUMNS.KIND_WIDTH}} "
            f"{label:>{essid_width}} {secure:>{COLUMNS.SECURE_WIDTH}}"
            f"{network.quality:>{COLUMNS.QUALITY_WIDTH}d}%"
        )

    def _essid_width(self, width: int) -> int:
        fixed = 3 + 2 + COLUMNS.KIND_WIDTH + 1 + 1 + COLUMNS.SECURE_WIDTH + COLUMNS.QUALITY_WIDTH + 1
        return max(COLUMNS.MIN_ESSID_WIDTH, width - fixed)

    def render(self) -> None:
        region = self.region
        height, width = region.size
        region.erase()
        region.border()
        count = len(self.networks)
        if not count:
            region.write(height // 2, max(1, (width - len(EMPTY_MESSAGE)) // 2), EMPTY_MESSAGE, Style.HEADING)
            return

        essid_width = self._essid_width(width)
        header = (
            f"  {'Type':>{COLUMNS.KIND_WIDTH}} {'Essid':>{essid_width}} "
            f"{'Secure':>{COLUMNS.SECURE_WIDTH}}  Quality"
        )
        region.write(1, 1, header, Style.HEADING)

        page = self.page_size
        last = min(count, self.top + page)
        for idx in range(self.top, last):
            style = row_style(idx == self.selected, idx == self.active)
            region.write(idx + 2 - self.top, 1, self.row_text(idx, essid_width), style)

        indicator = format_scroll_indicator(self.top, count, page)
        if indicator:
            region.write(height - 1, max(1, width - len(indicator) - 2), indicator)
        draw_scrollbar(
            region,
            top=2,
            height=page,
            x=width - 2,
            first_index=self.top,
            total=count,
            visible_rows=page,
        )
