from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _load_env_file(env_path: Optional[Path] = None) -> None:
    path = env_path or Path.cwd() / ".env"
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                os.environ.setdefault(key, value)
    except OSError:
        return


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def _to_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


@dataclass(frozen=True)
class MonitorConfig:
    poll_interval: float = 0.5
    max_history: int = 100
    log_level: str = "INFO"
    detect_code: bool = True

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "MonitorConfig":
        _load_env_file(env_path)

        return cls(
            poll_interval=_to_float("VCLIP_POLL_INTERVAL", cls.poll_interval),
            max_history=_to_int("VCLIP_MAX_HISTORY", cls.max_history),
            log_level=os.getenv("VCLIP_LOG_LEVEL", cls.log_level).upper(),
            detect_code=_to_bool(os.getenv("VCLIP_DETECT_CODE"), default=cls.detect_code),
        )
