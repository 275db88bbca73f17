"""State written by backend notifications and read by the input thread."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from snm_types import ActiveConnectionState, ConnectionStatus, NetworkEntry


@dataclass(frozen=True)
class ModelSnapshot:
    generation: int
    networks: Tuple[NetworkEntry, ...]
    state: ActiveConnectionState
    status: Optional[ConnectionStatus]


class SharedModel:
    """Holds the discovery list, active state and status behind one lock.

    Notification callbacks only ever replace these values. Anything that
    belongs to a view (selection, focus, edit buffers) stays with the input
    thread, which pulls a :class:`ModelSnapshot` when the generation moves.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self._generation = 0
        self._networks: Tuple[NetworkEntry, ...] = ()
        self._state = ActiveConnectionState.disconnected()
        self._status: Optional[ConnectionStatus] = None
        self._notices: List[str] = []
        self._notified: Set[str] = set()

    @property
    def generation(self) -> int:
        with self.lock:
            return self._generation

    def set_state(self, state: ActiveConnectionState) -> None:
        with self.lock:
            self._state = state
            self._notified.add("state")
            self._generation += 1

    def set_status(self, status: ConnectionStatus) -> None:
        with self.lock:
            self._status = status
            self._generation += 1

    def set_networks(self, networks: Sequence[NetworkEntry]) -> None:
        with self.lock:
            self._networks = tuple(networks)
            self._notified.add("networks")
            self._generation += 1

    def seed(self, state: ActiveConnectionState, networks: Sequence[NetworkEntry]) -> None:
        """Install the initial fetch, keeping any value a notification already wrote."""
        with self.lock:
            if "state" not in self._notified:
                self._state = state
            if "networks" not in self._notified:
                self._networks = tuple(networks)
            self._generation += 1

    def post_notice(self, message: str) -> None:
        """Queue a message for the input thread to surface on its next pass."""
        with self.lock:
            self._notices.append(message)
            self._generation += 1

    def drain_notices_locked(self) -> List[str]:
        notices, self._notices = self._notices, []
        return notices

    def snapshot_locked(self) -> ModelSnapshot:
        """Build a snapshot; the caller must already hold :attr:`lock`."""
        return ModelSnapshot(self._generation, self._networks, self._state, self._status)

    def snapshot(self) -> ModelSnapshot:
        with self.lock:
            return self.snapshot_locked()
