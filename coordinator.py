"""Top-level view state machine for the network client.

Keys are offered to the visible view first; whatever it leaves alone is
interpreted here according to the current :class:`View`. Backend calls run
on the calling (input) thread and never while the model lock is held.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

from keybindings import KEYS, Key
from network_list import NetworkListView
from network_props import NetworkPropsForm, ValidationError
from shared_model import SharedModel
from snm_client import BackendUnreachable
from surface import Region, Style
from tui_base import AppError, ErrorSeverity, UIState, append_log, current_status, handle_error


logger = logging.getLogger(__name__)

LIST_HINT = "Space/c: connect  d: disconnect  Enter/p: settings  q: quit"
FORM_HINT = "Space: toggle  <-/Esc: cancel  ->/Enter: apply"


class View(Enum):
    LISTING = "listing"
    EDITING_PROPERTIES = "editing"


class Outcome(Enum):
    CONTINUE = "continue"
    QUIT = "quit"


def load_initial_state(backend, model: SharedModel) -> None:
    """Fetch the current state and network list; BackendUnreachable propagates.

    Signals may already be flowing, so anything they delivered while the
    fetch was in flight wins over the fetched values.
    """
    state = backend.get_state()
    networks = backend.get_networks()
    model.seed(state, networks)
    logger.info("initial state %s %r, %d network(s)", state.kind.name, state.essid, len(networks))


class ViewCoordinator:
    """Routes input between the network list and the settings form.

    ``backend`` is anything with the ``SnmClient`` call surface:
    ``get_state``, ``get_networks``, ``get_properties``, ``set_properties``,
    ``connect`` and ``disconnect``.
    """

    def __init__(
        self,
        backend,
        model: SharedModel,
        list_view: NetworkListView,
        props_form: NetworkPropsForm,
        *,
        status_region: Optional[Region] = None,
        ui_state: Optional[UIState] = None,
    ) -> None:
        self.backend = backend
        self.model = model
        self.list_view = list_view
        self.props_form = props_form
        self.status_region = status_region
        self.ui_state = ui_state or UIState()
        self.view = View.LISTING
        self._seen_generation = -1

    # -- model synchronisation ------------------------------------------------

    def _sync_locked(self) -> bool:
        snapshot = self.model.snapshot_locked()
        if snapshot.generation == self._seen_generation:
            return False
        self._seen_generation = snapshot.generation
        for notice in self.model.drain_notices_locked():
            handle_error(AppError(notice, ErrorSeverity.ERROR), self.ui_state)
        self.list_view.set_active_state(snapshot.state, snapshot.status)
        self.list_view.replace(snapshot.networks)
        return True

    def sync(self) -> bool:
        with self.model.lock:
            return self._sync_locked()

    # -- rendering ------------------------------------------------------------

    def render(self) -> None:
        with self.model.lock:
            self._sync_locked()
            self.list_view.render()
            if self.view is View.EDITING_PROPERTIES:
                self.props_form.render()
            self._render_status()

    def _render_status(self) -> None:
        region = self.status_region
        if region is None:
            return
        region.erase()
        message = current_status(self.ui_state)
        if message:
            region.write(0, 1, message, Style.HEADING)
        else:
            region.write(0, 1, LIST_HINT if self.view is View.LISTING else FORM_HINT)

    def cursor(self) -> Optional[Tuple[Region, int, int]]:
        if self.view is not View.EDITING_PROPERTIES:
            return None
        position = self.props_form.cursor_position()
        if position is None:
            return None
        return (self.props_form.region, position[0], position[1])

    # -- input ------------------------------------------------------------------

    def handle_key(self, key: Key) -> Outcome:
        if key in KEYS.RESIZE:
            for region in (self.list_view.region, self.props_form.region, self.status_region):
                if region is not None:
                    region.relayout()
            self.sync()
            return Outcome.CONTINUE
        if self.view is View.LISTING:
            if self.list_view.handle_key(key):
                return Outcome.CONTINUE
            return self._listing_key(key)
        if self.props_form.handle_key(key):
            return Outcome.CONTINUE
        return self._editing_key(key)

    def _listing_key(self, key: Key) -> Outcome:
        if key in KEYS.QUIT or key in KEYS.ESCAPE:
            return Outcome.QUIT
        if key in KEYS.FORWARD or key in KEYS.PROPERTIES:
            self.open_properties()
        elif key in KEYS.CONNECT or key in KEYS.SPACE:
            self.connect()
        elif key in KEYS.DISCONNECT:
            self.disconnect()
        return Outcome.CONTINUE

    def _editing_key(self, key: Key) -> Outcome:
        if key in KEYS.BACK or key in KEYS.ESCAPE:
            self.cancel()
        elif key in KEYS.FORWARD:
            self.apply()
        return Outcome.CONTINUE

    # -- transitions ----------------------------------------------------------

    def show_list(self) -> None:
        self.view = View.LISTING
        self.list_view.region.raise_to_front()

    def open_properties(self) -> bool:
        network = self.list_view.selected_network()
        if network is None or not network.kind.requires_credentials:
            return False
        try:
            properties = self.backend.get_properties(network.essid)
        except BackendUnreachable as exc:
            handle_error(AppError(f"Cannot load settings: {exc}"), self.ui_state)
            return False
        self.props_form.assign(network.essid, properties)
        self.view = View.EDITING_PROPERTIES
        self.props_form.region.raise_to_front()
        return True

    def cancel(self) -> None:
        self.show_list()

    def apply(self) -> bool:
        try:
            self.props_form.apply()
        except ValidationError as exc:
            handle_error(AppError(str(exc), ErrorSeverity.WARNING), self.ui_state)
            return False
        essid, properties = self.props_form.current_snapshot()
        try:
            self.backend.set_properties(essid, properties)
        except BackendUnreachable as exc:
            handle_error(AppError(f"Cannot save settings: {exc}"), self.ui_state)
            return False
        append_log(self.ui_state, f"Saved settings for {essid}")
        self.show_list()
        return True

    def connect(self) -> bool:
        identity = self.list_view.selected_identity()
        if identity is None:
            return False
        try:
            self.backend.connect(identity)
        except BackendUnreachable as exc:
            handle_error(AppError(f"Connect failed: {exc}"), self.ui_state)
            return False
        append_log(self.ui_state, f"Connecting to {identity.essid or 'ethernet'}…")
        return True

    def disconnect(self) -> bool:
        try:
            self.backend.disconnect()
        except BackendUnreachable as exc:
            handle_error(AppError(f"Disconnect failed: {exc}"), self.ui_state)
            return False
        append_log(self.ui_state, "Disconnect requested")
        return True
