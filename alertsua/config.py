"""
Runtime configuration.

Values are layered, later layers winning:

  1. AppConfig defaults
  2. JSON config file (``--config``, or ~/.config/alertsua/config.json)
  3. environment: ALERTSINUA_TOKEN, ALERTSUA_LOCALE
  4. command line flags (applied by the CLI)

Example config.json
-------------------
    {
        "locale": "en",
        "fetch_interval": 60,
        "db_path": "/var/tmp/alertsua.sqlite"
    }
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .ingest.alerts_client import API_BASE_URL

log = logging.getLogger(__name__)

CACHE_DIR = Path.home() / ".cache" / "alertsua"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "alertsua" / "config.json"

ENV_TOKEN = "ALERTSINUA_TOKEN"
ENV_LOCALE = "ALERTSUA_LOCALE"

_PATH_FIELDS = ("db_path", "log_dir")
_FLOAT_FIELDS = ("tick_rate", "frame_rate", "fetch_interval",
                 "initial_fetch_delay", "request_timeout")
_BOOL_FIELDS = ("use_db", "verbose")


class ConfigError(ValueError):
    """Unreadable or invalid configuration."""


@dataclass
class AppConfig:
    token: Optional[str] = None
    base_url: str = API_BASE_URL
    locale: str = "uk"
    tick_rate: float = 1.0              # ticks per second
    frame_rate: float = 4.0             # renders per second
    fetch_interval: float = 30.0        # seconds between fetches
    initial_fetch_delay: float = 2.0
    request_timeout: float = 10.0
    feed: str = "status"                # "status" or "alerts"
    use_db: bool = True
    db_path: Path = field(default_factory=lambda: CACHE_DIR / "alertsua.sqlite")
    log_dir: Path = field(default_factory=lambda: CACHE_DIR / "logs")
    verbose: bool = False

    def merge(self, values: Mapping[str, Any]) -> "AppConfig":
        """Copy with the given fields overridden; None values are ignored."""
        known = {f.name for f in dataclasses.fields(self)}
        changes: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                log.warning("Ignoring unknown config key %r", key)
                continue
            if value is None:
                continue
            changes[key] = _coerce(key, value)
        return dataclasses.replace(self, **changes)

    def validate(self) -> None:
        if self.locale not in ("uk", "en"):
            raise ConfigError(f"locale must be 'uk' or 'en', not {self.locale!r}")
        if self.feed not in ("status", "alerts"):
            raise ConfigError(f"feed must be 'status' or 'alerts', not {self.feed!r}")
        for name in ("tick_rate", "frame_rate", "fetch_interval", "request_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")


def _coerce(key: str, value: Any) -> Any:
    # bool is an int subclass; keep it out of the numeric fields
    if key in _FLOAT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{key} must be a number, not {value!r}")
        return float(value)
    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, not {value!r}")
        return value
    if key in _PATH_FIELDS:
        if not isinstance(value, (str, os.PathLike)):
            raise ConfigError(f"{key} must be a path, not {value!r}")
        return Path(value).expanduser()
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, not {value!r}")
    return value


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Defaults, then the JSON file, then the environment."""
    config = AppConfig()

    explicit = path is not None
    path = Path(path).expanduser() if explicit else DEFAULT_CONFIG_PATH
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"cannot read config {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must hold a JSON object")
        config = config.merge(data)
        log.info("Loaded config from %s", path)
    elif explicit:
        raise ConfigError(f"config file not found: {path}")

    env = os.environ if env is None else env
    config = config.merge({
        "token": env.get(ENV_TOKEN) or None,
        "locale": env.get(ENV_LOCALE) or None,
    })
    return config
