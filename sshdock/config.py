"""
sshdock settings store.

Settings live in ~/.sshdock/config.json next to the default host file
(~/.sshdock/servers.yaml). Listeners registered on the manager run after
every successful save, which is how the app reloads its catalog when a
host source changes.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

SSHDOCK_DIR = Path.home() / ".sshdock"
DEFAULT_CONFIG_FILE = SSHDOCK_DIR / "config.json"
DEFAULT_HOSTS_FILE = SSHDOCK_DIR / "servers.yaml"

SettingsListener = Callable[["AppSettings"], None]


@dataclass
class AppSettings:
    """
    User preferences.

    Connection behavior:
        allow_multiple_connections: New terminal per plain connection
            instead of reusing the open one. Forwarding sessions are
            reused regardless.
        open_project_catalog: ``cd`` into the host ``path`` (or the
            project directory on fast open) after connecting.
        custom_commands: Run after connecting, unless the host has its own.
    """
    allow_multiple_connections: bool = False
    open_project_catalog: bool = False
    custom_commands: list[str] = field(default_factory=list)

    # Pickers list user@host instead of the configured name
    show_hosts_in_pick_lists: bool = False

    # Oldest first, no eviction
    recently_used_forwardings: list[str] = field(default_factory=list)

    hosts_files: list[str] = field(default_factory=lambda: [str(DEFAULT_HOSTS_FILE)])
    ssh_config_import: Optional[str] = None

    window_width: int = 1100
    window_height: int = 700
    output_height: int = 160

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Build from stored JSON; keys this version does not know are dropped."""
        known = {f.name for f in fields(cls)}
        dropped = sorted(set(data) - known)
        if dropped:
            logger.debug(f"Ignoring unknown settings: {', '.join(dropped)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def add_recent_forwarding(self, spec: str) -> bool:
        """Keep a forwarding spec; False if it is already kept."""
        if spec in self.recently_used_forwardings:
            return False
        self.recently_used_forwardings.append(spec)
        return True


class SettingsManager:
    """
    Lazy-loading owner of the AppSettings instance.

    Usage:
        manager = SettingsManager()
        manager.settings.allow_multiple_connections = True
        manager.save()    # listeners run here
    """

    def __init__(self, config_path: Path = None):
        self._path = Path(config_path) if config_path else DEFAULT_CONFIG_FILE
        self._current: Optional[AppSettings] = None
        self._listeners: list[SettingsListener] = []

    @property
    def settings(self) -> AppSettings:
        if self._current is None:
            self._current = self.load()
        return self._current

    @property
    def config_path(self) -> Path:
        return self._path

    @property
    def config_dir(self) -> Path:
        return self._path.parent

    def add_listener(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def load(self) -> AppSettings:
        """Read the settings file; a missing or unreadable file yields defaults."""
        if not self._path.exists():
            logger.debug(f"{self._path} does not exist, using default settings")
            return AppSettings()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            settings = AppSettings.from_dict(raw)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Cannot read settings from {self._path} ({e}), using defaults")
            return AppSettings()
        logger.debug(f"Settings read from {self._path}")
        return settings

    def save(self) -> None:
        """Write the settings file, then notify listeners."""
        if self._current is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._current.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot write settings to {self._path}: {e}")
            return
        logger.debug(f"Settings written to {self._path}")

        for listener in list(self._listeners):
            listener(self._current)

    def reset(self) -> AppSettings:
        """Back to defaults in memory only; call save() to persist."""
        self._current = AppSettings()
        return self._current


_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """Process-wide manager on the default config path."""
    global _manager
    if _manager is None:
        _manager = SettingsManager()
    return _manager
