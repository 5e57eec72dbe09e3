"""
Map a local file to the server whose project contains it.

Servers declare ``project`` maps of local directory -> remote directory.
The first server (catalog order) with a matching local directory wins,
even when a later server maps a deeper directory.
"""

from __future__ import annotations
import posixpath
import re
from dataclasses import dataclass
from typing import Optional

from .catalog import ServerCatalog
from .models import ServerEntry

# Any word character followed by a colon, wherever it appears
DRIVE_LETTER = re.compile(r"\w:")


def normalize_path(path: str) -> str:
    """
    Normalize a local path for prefix comparison.

    Backslashes become forward slashes, redundant separators and dot
    segments are collapsed, and every drive-letter token (a word
    character followed by ``:``) is lower-cased. Everything else keeps
    its case.
    """
    path = path.replace("\\", "/")
    path = posixpath.normpath(path) if path else path
    return DRIVE_LETTER.sub(lambda m: m.group(0).lower(), path)


def is_path_inside(child: str, parent: str) -> bool:
    """True if ``child`` is strictly below ``parent`` (both normalized)."""
    if not child or not parent or child == parent:
        return False
    base = parent if parent.endswith("/") else parent + "/"
    return child.startswith(base)


@dataclass(frozen=True)
class ProjectMatch:
    entry: ServerEntry
    remote_dir: str

    @property
    def server_name(self) -> str:
        return self.entry.name


class ProjectPathMapper:
    """Resolves local file paths against the live catalog."""

    def __init__(self, catalog: ServerCatalog):
        self._catalog = catalog

    def resolve(self, file_path: str) -> Optional[ProjectMatch]:
        if not file_path:
            return None
        target = normalize_path(file_path)
        for entry in self._catalog:
            for local_dir, remote_dir in entry.config.project.items():
                if is_path_inside(target, normalize_path(local_dir)):
                    return ProjectMatch(entry=entry, remote_dir=remote_dir)
        return None
