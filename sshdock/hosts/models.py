"""
Host configuration models.

``HostConfig`` mirrors one raw host definition and tolerates missing
fields. ``HostConfig.resolve()`` validates it into a ``ResolvedHost``
whose fields are always populated, so connection code never re-checks
optional values.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import IncompleteConfigError

logger = logging.getLogger(__name__)

DEFAULT_SSH_PORT = 22

# raw key -> HostConfig attribute. Accepted spellings: the data model names
# (displayName, useAgent, privateKeyPath, projectMap, startupCommands,
# portKnock), the historical camelCase keys and snake_case.
FIELD_ALIASES = {
    "name": "name",
    "displayName": "name",
    "display_name": "name",
    "username": "username",
    "user": "username",
    "host": "host",
    "port": "port",
    "password": "password",
    "privateKey": "private_key",
    "privateKeyPath": "private_key",
    "private_key_path": "private_key",
    "private_key": "private_key",
    "agent": "agent",
    "useAgent": "agent",
    "use_agent": "agent",
    "project": "project",
    "projectMap": "project",
    "project_map": "project",
    "path": "path",
    "customCommands": "custom_commands",
    "custom_commands": "custom_commands",
    "startupCommands": "custom_commands",
    "startup_commands": "custom_commands",
    "portKnocking": "port_knocking",
    "port_knocking": "port_knocking",
    "portKnock": "port_knocking",
    "port_knock": "port_knocking",
}


def _as_port(value: Any, what: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {what} {value!r}")
        return None


@dataclass
class PortKnock:
    """Request sent before the ssh command. ``host`` falls back to the server host."""
    port: Optional[int] = None
    host: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return self.port is not None and self.port > 0

    @classmethod
    def from_dict(cls, data: Any) -> Optional[PortKnock]:
        if not isinstance(data, dict):
            return None
        port = _first(data, "knockPort", "knock_port", "port")
        host = _first(data, "knockHost", "knock_host", "host")
        return cls(port=_as_port(port, "knock port"), host=_as_text(host))


@dataclass
class HostConfig:
    """
    One configured remote target, exactly as found in the host files.

    Every field except ``name`` may be missing. Incomplete configs are
    kept in the catalog and only rejected when a connection is attempted.
    """
    name: Optional[str] = None
    username: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    password: Optional[str] = None
    private_key: Optional[str] = None
    agent: bool = False
    project: dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None
    custom_commands: list[str] = field(default_factory=list)
    port_knocking: Optional[PortKnock] = None

    @classmethod
    def from_dict(cls, data: dict) -> HostConfig:
        """Build from a raw host definition, ignoring unknown keys."""
        values: dict[str, Any] = {}
        for key, value in data.items():
            attr = FIELD_ALIASES.get(key)
            if attr is None:
                continue
            values[attr] = value

        project = values.get("project") or {}
        if not isinstance(project, dict):
            logger.warning(f"Ignoring project map of '{values.get('name')}': not a mapping")
            project = {}

        commands = values.get("custom_commands") or []
        if isinstance(commands, str):
            commands = [commands]

        return cls(
            name=_as_text(values.get("name")),
            username=_as_text(values.get("username")),
            host=_as_text(values.get("host")),
            port=_as_port(values.get("port"), "port"),
            password=_as_text(values.get("password")),
            private_key=_as_text(values.get("private_key")),
            agent=bool(values.get("agent")),
            project={str(k): str(v) for k, v in project.items()},
            path=_as_text(values.get("path")),
            custom_commands=[str(c) for c in commands],
            port_knocking=PortKnock.from_dict(values.get("port_knocking")),
        )

    def missing_fields(self) -> list[str]:
        return [name for name in ("host", "username") if not getattr(self, name)]

    def resolve(self, server_name: str = None) -> ResolvedHost:
        """
        Validate and return the fully populated form.

        Raises:
            IncompleteConfigError: host or username is missing
        """
        missing = self.missing_fields()
        if missing:
            raise IncompleteConfigError(server_name or self.name or "", missing)

        knock = None
        if self.port_knocking is not None and self.port_knocking.enabled:
            knock = PortKnock(
                port=self.port_knocking.port,
                host=self.port_knocking.host or self.host,
            )

        return ResolvedHost(
            name=server_name or self.name or f"{self.username}@{self.host}",
            username=self.username,
            host=self.host,
            port=self.port if self.port else DEFAULT_SSH_PORT,
            password=self.password,
            private_key=self.private_key,
            agent=self.agent,
            path=self.path,
            custom_commands=list(self.custom_commands),
            port_knocking=knock,
        )


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class ResolvedHost:
    """Validated host config. ``port_knocking`` is set only when enabled."""
    name: str
    username: str
    host: str
    port: int = DEFAULT_SSH_PORT
    password: Optional[str] = None
    private_key: Optional[str] = None
    agent: bool = False
    path: Optional[str] = None
    custom_commands: list[str] = field(default_factory=list)
    port_knocking: Optional[PortKnock] = None


@dataclass
class ServerEntry:
    """Catalog entry: display name plus the owned host config."""
    name: str
    config: HostConfig

    def __repr__(self) -> str:
        target = f"{self.config.username}@{self.config.host}"
        return f"ServerEntry({self.name}, {target})"
