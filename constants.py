from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BackendNames:
    SERVICE: str = "com.github.okeri.snm"
    INTERFACE: str = "com.github.okeri.snm"
    OBJECT_PATH: str = "/"


@dataclass(frozen=True)
class UIDefaults:
    LOG_HISTORY: int = 200
    STATUS_TIMEOUT: float = 5.0
    INPUT_TIMEOUT_MS: int = 200
    DISPATCH_POLL: float = 0.25
    PASSWORD_MASK: str = "*"
    DEFAULT_THRESHOLD: int = 65


@dataclass(frozen=True)
class RegionSizing:
    width: int
    height: int


@dataclass(frozen=True)
class ListColumns:
    KIND_WIDTH: int = 5
    SECURE_WIDTH: int = 10
    QUALITY_WIDTH: int = 8
    MIN_ESSID_WIDTH: int = 8


BACKEND = BackendNames()
UI = UIDefaults()
COLUMNS = ListColumns()

NETWORK_LIST_REGION = RegionSizing(width=80, height=24)
PROPERTIES_REGION = RegionSizing(width=40, height=11)
