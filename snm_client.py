"""Blocking D-Bus client for the snm network-management service."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from jeepney import DBusAddress, MessageFlag, new_method_call
from jeepney.io.blocking import DBusConnection, open_dbus_connection
from jeepney.wrappers import DBusErrorResponse, unwrap_msg

from constants import BACKEND, UI
from snm_types import (
    ActiveConnectionState,
    ConnectionIdentity,
    ConnectionProperties,
    ConnectionStatus,
    ConnectivityKind,
    NetworkEntry,
)


logger = logging.getLogger(__name__)

BUSES = {"system": "SYSTEM", "session": "SESSION"}

SNM_ADDRESS = DBusAddress(BACKEND.OBJECT_PATH, bus_name=BACKEND.SERVICE, interface=BACKEND.INTERFACE)


class BackendUnreachable(Exception):
    """The service could not be reached or refused to complete a call."""


def bus_address(name: str) -> str:
    try:
        return BUSES[name.lower()]
    except KeyError:
        raise ValueError(f"unknown bus {name!r}, expected one of {', '.join(BUSES)}") from None


def open_connection(bus: str = "system") -> DBusConnection:
    try:
        return open_dbus_connection(bus=bus_address(bus))
    except (OSError, KeyError) as exc:
        raise BackendUnreachable(f"cannot connect to the {bus} bus: {exc}") from exc


# -- marshalling ---------------------------------------------------------


def unmarshal_network(raw: Sequence) -> NetworkEntry:
    kind, essid, encrypted, quality = raw[:4]
    return NetworkEntry(
        kind=ConnectivityKind(kind),
        essid=str(essid),
        encrypted=bool(encrypted),
        quality=max(0, min(100, int(quality))),
    )


def unmarshal_networks(raw: Iterable[Sequence]) -> List[NetworkEntry]:
    return [unmarshal_network(item) for item in raw]


def unmarshal_state(raw: Sequence) -> ActiveConnectionState:
    return ActiveConnectionState(network=unmarshal_network(raw), address=str(raw[4]))


def unmarshal_status(raw: int) -> ConnectionStatus:
    return ConnectionStatus(raw)


def unmarshal_properties(body: Sequence) -> ConnectionProperties:
    password, threshold, auto_connect, encrypted, roaming = body
    return ConnectionProperties(
        auto_connect=bool(auto_connect),
        password=str(password) if encrypted else None,
        roaming_threshold=int(threshold) if roaming else None,
    )


def marshal_properties(essid: str, properties: ConnectionProperties) -> Tuple:
    password = properties.password if properties.password is not None else ""
    threshold = properties.roaming_threshold
    if threshold is None:
        threshold = -UI.DEFAULT_THRESHOLD
    return (
        essid,
        password,
        threshold,
        properties.auto_connect,
        properties.password is not None,
        properties.roaming_threshold is not None,
    )


def marshal_identity(identity: ConnectionIdentity) -> Tuple:
    return ((int(identity.kind), identity.essid, identity.encrypted),)


# -- client --------------------------------------------------------------


class SnmClient:
    """Request/response calls against the service on one bus connection.

    A jeepney blocking connection must stay on the thread that uses it, so
    the notification thread opens its own (see ``update_dispatcher``).
    """

    def __init__(self, connection: DBusConnection) -> None:
        self._conn = connection

    @classmethod
    def connect_bus(cls, bus: str = "system") -> "SnmClient":
        return cls(open_connection(bus))

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SnmClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(self, method: str, signature: str | None = None, body: Tuple = ()) -> Tuple:
        msg = new_method_call(SNM_ADDRESS, method, signature, body)
        logger.debug("call %s%r", method, body if method != "set_props" else "(...)")
        try:
            reply = self._conn.send_and_get_reply(msg)
            return unwrap_msg(reply)
        except DBusErrorResponse as exc:
            raise BackendUnreachable(f"{method} failed: {exc.name}: {' '.join(map(str, exc.data))}") from exc
        except (OSError, ConnectionError) as exc:
            raise BackendUnreachable(f"{method} failed: {exc}") from exc

    def _send(self, method: str, signature: str | None = None, body: Tuple = ()) -> None:
        msg = new_method_call(SNM_ADDRESS, method, signature, body)
        msg.header.flags |= MessageFlag.no_reply_expected
        logger.debug("send %s", method)
        try:
            self._conn.send(msg)
        except (OSError, ConnectionError) as exc:
            raise BackendUnreachable(f"{method} failed: {exc}") from exc

    @staticmethod
    def _decode(method: str, decoder, raw):
        try:
            return decoder(raw)
        except (TypeError, ValueError) as exc:
            raise BackendUnreachable(f"{method} returned a malformed reply: {exc}") from exc

    def hello(self) -> None:
        self._send("hello")

    def get_state(self) -> ActiveConnectionState:
        return self._decode("get_state", lambda body: unmarshal_state(body[0]), self._call("get_state"))

    def get_networks(self) -> List[NetworkEntry]:
        return self._decode("get_networks", lambda body: unmarshal_networks(body[0]), self._call("get_networks"))

    def get_properties(self, essid: str) -> ConnectionProperties:
        return self._decode("get_props", unmarshal_properties, self._call("get_props", "s", (essid,)))

    def set_properties(self, essid: str, properties: ConnectionProperties) -> None:
        self._send("set_props", "ssibbb", marshal_properties(essid, properties))

    def connect(self, identity: ConnectionIdentity) -> None:
        logger.info("connect %s %r", identity.kind.name, identity.essid)
        self._send("connect", "(usb)", marshal_identity(identity))

    def disconnect(self) -> None:
        logger.info("disconnect")
        self._send("disconnect")
