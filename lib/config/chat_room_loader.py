import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .yaml_loader import load_yaml

DEFAULT_CONFIG_PATH = "config/chat_room.yaml"


@dataclass
class RoomConfig:
    """Typed view over ``chat_room.yaml``.

    Every key is optional; missing ones keep the defaults below.  The store
    URL may be overridden through the ``DATABASE_URL`` environment variable.
    """

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    store_url: str = "sqlite:///chat_room.db"
    reaper_enabled: bool = True
    reaper_interval_seconds: float = 15.0
    inactive_after_seconds: float = 10.0
    log_level: str = "INFO"
    raw: Dict[str, Any] = field(default_factory=dict)


def load_room_config(path: Optional[str] = DEFAULT_CONFIG_PATH, env: Optional[Dict[str, str]] = None) -> RoomConfig:
    """Load ``chat_room.yaml`` and return a :class:`RoomConfig`.

    Parameters
    ----------
    path:
        File system path to the YAML file.  A missing file is not an error.
    env:
        Mapping consulted for ``DATABASE_URL``; defaults to ``os.environ``.
        Loading ``.env`` is left to the process entry point.
    """

    if env is None:
        env = dict(os.environ)

    raw = load_yaml(path) if path and Path(path).exists() else {}
    server = raw.get("server", {}) or {}
    store = raw.get("store", {}) or {}
    reaper = raw.get("reaper", {}) or {}
    logging_cfg = raw.get("logging", {}) or {}

    cfg = RoomConfig(raw=raw)
    cfg.host = str(server.get("host", cfg.host))
    cfg.port = int(server.get("port", cfg.port))
    cfg.cors_origins = list(server.get("cors_origins", cfg.cors_origins))
    cfg.store_url = env.get("DATABASE_URL") or str(store.get("url", cfg.store_url))
    cfg.reaper_enabled = bool(reaper.get("enabled", cfg.reaper_enabled))
    cfg.reaper_interval_seconds = float(reaper.get("interval_seconds", cfg.reaper_interval_seconds))
    cfg.inactive_after_seconds = float(reaper.get("inactive_after_seconds", cfg.inactive_after_seconds))
    cfg.log_level = str(logging_cfg.get("level", cfg.log_level))
    return cfg
