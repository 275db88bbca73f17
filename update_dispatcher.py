"""Background thread delivering snm signals to the shared model."""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from jeepney import HeaderFields, MatchRule, Message, MessageType, message_bus
from jeepney.io.blocking import DBusConnection
from jeepney.wrappers import DBusErrorResponse, unwrap_msg

from constants import BACKEND, UI
from snm_client import (
    BackendUnreachable,
    open_connection,
    unmarshal_networks,
    unmarshal_state,
    unmarshal_status,
)
from snm_types import ActiveConnectionState, ConnectionStatus, NetworkEntry


logger = logging.getLogger(__name__)

SIGNAL_RULE = MatchRule(type="signal", interface=BACKEND.INTERFACE, path=BACKEND.OBJECT_PATH)


class UpdateDispatcher:
    def __init__(
        self,
        *,
        on_state: Callable[[ActiveConnectionState], None],
        on_status: Callable[[ConnectionStatus], None],
        on_networks: Callable[[List[NetworkEntry]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        connect: Callable[[], DBusConnection] = open_connection,
        poll_interval: float = UI.DISPATCH_POLL,
    ) -> None:
        self._on_error = on_error
        self._connect = connect
        self._poll_interval = poll_interval
        self._handlers = {
            "state_changed": lambda body: on_state(unmarshal_state(body[0])),
            "connect_status_changed": lambda body: on_status(unmarshal_status(body[0])),
            "network_list": lambda body: on_networks(unmarshal_networks(body[0])),
        }
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._conn: Optional[DBusConnection] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Subscribe to the service signals and start delivering them."""
        conn = self._connect()
        try:
            unwrap_msg(conn.send_and_get_reply(message_bus.AddMatch(SIGNAL_RULE)))
        except (DBusErrorResponse, OSError) as exc:
            conn.close()
            raise BackendUnreachable(f"cannot subscribe to {BACKEND.INTERFACE} signals: {exc}") from exc
        self._conn = conn
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="snm-updates", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "UpdateDispatcher":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _run(self) -> None:
        conn = self._conn
        if conn is None:
            return
        while not self._stop.is_set():
            try:
                msg = conn.receive(timeout=self._poll_interval)
            except TimeoutError:
                continue
            except (OSError, ConnectionError) as exc:
                if self._stop.is_set():
                    break
                logger.error("signal connection lost: %s", exc)
                if self._on_error is not None:
                    self._on_error(exc)
                break
            self.dispatch(msg)

    def dispatch(self, msg: Message) -> bool:
        """Route one message; return True when it was a handled signal."""
        header = msg.header
        if header.message_type != MessageType.signal:
            return False
        if header.fields.get(HeaderFields.interface) != BACKEND.INTERFACE:
            return False
        member = header.fields.get(HeaderFields.member)
        handler = self._handlers.get(member)
        if handler is None:
            logger.debug("ignoring signal %s", member)
            return False
        try:
            handler(msg.body)
        except (IndexError, TypeError, ValueError) as exc:
            logger.warning("malformed %s signal %r: %s", member, msg.body, exc)
            return False
        logger.debug("signal %s", member)
        return True
