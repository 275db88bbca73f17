from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping

from dotenv import load_dotenv

from constants import UI
from validators import validate_float, validate_int


APP_NAME = "snm-curses"
CONFIG_DIR = Path.home() / ".config" / APP_NAME
CACHE_DIR = Path.home() / ".cache"
ENV_FILES = (CONFIG_DIR / "env", Path.cwd() / ".env")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    bus: str = "system"
    log_file: Path = CACHE_DIR / f"{APP_NAME}.log"
    log_level: str = "INFO"
    status_timeout: float = UI.STATUS_TIMEOUT
    input_timeout_ms: int = UI.INPUT_TIMEOUT_MS
    warnings: List[str] = field(default_factory=list, compare=False)

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)


def load_env_files() -> None:
    for path in ENV_FILES:
        if path.is_file():
            load_dotenv(path, override=False)


def settings_from_env(env: Mapping[str, str]) -> Settings:
    warnings: List[str] = []

    bus = (env.get("SNM_BUS") or "system").strip().lower()
    if bus not in ("system", "session"):
        warnings.append(f"SNM_BUS={bus!r} is not 'system' or 'session'; using system")
        bus = "system"

    log_file = Path(env.get("SNM_LOG_FILE") or Settings.log_file).expanduser()

    log_level = (env.get("SNM_LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        warnings.append(f"SNM_LOG_LEVEL={log_level!r} is not a logging level; using INFO")
        log_level = "INFO"

    status = validate_float(env.get("SNM_STATUS_TIMEOUT"), default=UI.STATUS_TIMEOUT, name="SNM_STATUS_TIMEOUT")
    if not status.is_valid:
        warnings.append(status.error or "")

    timeout = validate_int(
        env.get("SNM_INPUT_TIMEOUT_MS"),
        default=UI.INPUT_TIMEOUT_MS,
        name="SNM_INPUT_TIMEOUT_MS",
        min_value=10,
        max_value=5000,
    )
    if not timeout.is_valid:
        warnings.append(timeout.error or "")

    return Settings(
        bus=bus,
        log_file=log_file,
        log_level=log_level,
        status_timeout=status.value if status.value is not None else UI.STATUS_TIMEOUT,
        input_timeout_ms=timeout.value if timeout.is_valid and timeout.value is not None else UI.INPUT_TIMEOUT_MS,
        warnings=warnings,
    )


def load_settings() -> Settings:
    load_env_files()
    return settings_from_env(os.environ)


def configure_logging(settings: Settings) -> None:
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=settings.log_file,
        level=settings.level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    for warning in settings.warnings:
        logging.getLogger(__name__).warning(warning)
