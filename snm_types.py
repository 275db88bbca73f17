"""Value types exchanged with the snm network-management service."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional


class ConnectivityKind(IntEnum):
    NOT_CONNECTED = 0
    ETHERNET = 1
    WIFI = 2
    CONNECTING_ETHERNET = 3
    CONNECTING_WIFI = 4

    @property
    def is_wired(self) -> bool:
        return self in (ConnectivityKind.ETHERNET, ConnectivityKind.CONNECTING_ETHERNET)

    @property
    def is_wireless(self) -> bool:
        return self in (ConnectivityKind.WIFI, ConnectivityKind.CONNECTING_WIFI)

    @property
    def is_connecting(self) -> bool:
        return self in (ConnectivityKind.CONNECTING_ETHERNET, ConnectivityKind.CONNECTING_WIFI)

    @property
    def requires_credentials(self) -> bool:
        return self.is_wireless

    @property
    def short_label(self) -> str:
        if self.is_wired:
            return "eth"
        if self.is_wireless:
            return "wifi"
        return "-"


class ConnectionStatus(IntEnum):
    INITIALIZING = 0
    CONNECTING = 1
    AUTHENTICATING = 2
    ACQUIRING_ADDRESS = 3
    AUTH_FAILED = 4
    ABORTED = 5
    CONNECT_FAILED = 6

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ConnectionStatus.INITIALIZING: "Initializing",
    ConnectionStatus.CONNECTING: "Connecting",
    ConnectionStatus.AUTHENTICATING: "Authenticating",
    ConnectionStatus.ACQUIRING_ADDRESS: "Getting ip address",
    ConnectionStatus.AUTH_FAILED: "Authentication failed",
    ConnectionStatus.ABORTED: "Aborted",
    ConnectionStatus.CONNECT_FAILED: "Connection failed",
}


@dataclass(frozen=True)
class NetworkEntry:
    kind: ConnectivityKind
    essid: str = ""
    encrypted: bool = False
    quality: int = 0

    def same_network(self, essid: str, kind: ConnectivityKind) -> bool:
        """True when ``essid``/``kind`` name this network, ignoring connecting phases."""
        if self.essid != essid:
            return False
        return self.kind.is_wired == kind.is_wired and self.kind.is_wireless == kind.is_wireless


@dataclass(frozen=True)
class ActiveConnectionState:
    network: NetworkEntry
    address: str = ""

    @classmethod
    def disconnected(cls) -> "ActiveConnectionState":
        return cls(NetworkEntry(ConnectivityKind.NOT_CONNECTED))

    @property
    def kind(self) -> ConnectivityKind:
        return self.network.kind

    @property
    def essid(self) -> str:
        return self.network.essid

    @property
    def is_active(self) -> bool:
        return self.kind != ConnectivityKind.NOT_CONNECTED

    @property
    def is_online(self) -> bool:
        return self.kind in (ConnectivityKind.ETHERNET, ConnectivityKind.WIFI)

    def matches(self, entry: NetworkEntry) -> bool:
        return self.is_active and entry.same_network(self.essid, self.kind)

    def describe(self, status: Optional[ConnectionStatus]) -> str:
        if self.is_online:
            return f"{self.essid} [{self.address}]"
        if self.kind.is_connecting:
            label = status.label if status is not None else "Unknown status"
            return f"{self.essid} ({label})"
        return self.essid


@dataclass(frozen=True)
class ConnectionProperties:
    auto_connect: bool = False
    password: Optional[str] = None
    roaming_threshold: Optional[int] = None

    @property
    def encrypted(self) -> bool:
        return self.password is not None

    @property
    def roaming(self) -> bool:
        return self.roaming_threshold is not None


@dataclass(frozen=True)
class ConnectionIdentity:
    kind: ConnectivityKind
    essid: str
    encrypted: bool

    @classmethod
    def from_entry(cls, entry: NetworkEntry) -> "ConnectionIdentity":
        return cls(kind=entry.kind, essid=entry.essid, encrypted=entry.encrypted)


def unique_networks(networks: Iterable[NetworkEntry]) -> List[NetworkEntry]:
    """Drop repeated (kind, essid) pairs, keeping the first one reported."""
    seen = set()
    result: List[NetworkEntry] = []
    for network in networks:
        key = (network.kind, network.essid)
        if key in seen:
            continue
        seen.add(key)
        result.append(network)
    return result
