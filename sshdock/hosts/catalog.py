"""
Registry of configured servers.

The catalog is rebuilt wholesale on every reload so that entries removed
from the host files never linger.
"""

from __future__ import annotations
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Iterator, Optional

from ..errors import ConfigMalformedError
from .models import HostConfig, ServerEntry

logger = logging.getLogger(__name__)


def display_name(config: HostConfig, show_hosts: bool = False) -> str:
    """Name shown in pickers: ``user@host`` when requested or when unnamed."""
    if show_hosts or not config.name:
        return f"{config.username}@{config.host}"
    return config.name


class ServerCatalog:
    """
    Ordered, name-unique list of ServerEntry.

    Usage:
        catalog = ServerCatalog()
        catalog.reload([{"name": "alpha", "host": "10.0.0.1", "username": "me"}])
        catalog.find("alpha")
        catalog.list()    # ["alpha"]
    """

    def __init__(self):
        self._entries: tuple[ServerEntry, ...] = ()

    def reload(self, raw_configs: Any, show_hosts: bool = False) -> None:
        """
        Replace the catalog with the given raw host definitions.

        Args:
            raw_configs: Sequence of host mappings
            show_hosts: Display hosts as ``user@host`` in pickers

        Raises:
            ConfigMalformedError: input is not a sequence of mappings. The
                catalog is left empty in that case.
        """
        if isinstance(raw_configs, (str, bytes)) or not isinstance(raw_configs, Sequence):
            self._entries = ()
            raise ConfigMalformedError(
                f"expected a list of servers, got {type(raw_configs).__name__}"
            )

        entries: list[ServerEntry] = []
        seen: set[str] = set()
        for index, raw in enumerate(raw_configs):
            if not isinstance(raw, Mapping):
                self._entries = ()
                raise ConfigMalformedError(
                    f"server #{index + 1} is {type(raw).__name__}, expected an object"
                )

            config = HostConfig.from_dict(dict(raw))
            name = display_name(config, show_hosts)
            if name in seen:
                logger.warning(f"Duplicate server name '{name}', keeping the first one")
                continue
            seen.add(name)
            entries.append(ServerEntry(name=name, config=config))

        self._entries = tuple(entries)
        logger.debug(f"Catalog reloaded with {len(entries)} server(s)")

    def clear(self) -> None:
        self._entries = ()

    def find(self, name: str) -> Optional[ServerEntry]:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def list(self) -> list[str]:
        """Display names in catalog order."""
        return [entry.name for entry in self._entries]

    @property
    def entries(self) -> tuple[ServerEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[ServerEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
