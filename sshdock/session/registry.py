"""
Live session bookkeeping.

Every read-modify-write goes through one lock, so two commands racing
for the same key can never create two sessions.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from .base import Session, SessionState

logger = logging.getLogger(__name__)

SessionKey = tuple[str, bool]


@dataclass(eq=False)
class SessionHandle:
    """Registry record for one session. Does not own the session's lifetime."""
    name: str
    username: str
    host: str
    is_forwarding: bool
    session: Session
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def key(self) -> SessionKey:
        return (self.name, self.is_forwarding)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "username": self.username,
            "host": self.host,
            "is_forwarding": self.is_forwarding,
            "title": self.session.title,
            "created_at": self.created_at.isoformat(),
        }

    def __repr__(self) -> str:
        kind = " forwarding" if self.is_forwarding else ""
        return f"<SessionHandle {self.name} {self.username}@{self.host}{kind}>"


class SessionRegistry:
    """
    Handles keyed by (server name, is_forwarding).

    Usage:
        registry = SessionRegistry()
        handle, created = registry.get_or_create(("alpha", False), factory)
        registry.remove(handle.session)
    """

    def __init__(self):
        self._handles: list[SessionHandle] = []
        # Reentrant so a factory that closes a session cannot deadlock
        self._lock = threading.RLock()

    def get_or_create(
        self,
        key: SessionKey,
        factory: Callable[[], SessionHandle],
        force_new: bool = False,
    ) -> tuple[SessionHandle, bool]:
        """
        Return the live handle for ``key`` or register a new one.

        Args:
            key: (server name, is_forwarding)
            factory: Builds the new handle; runs under the registry lock
            force_new: Skip the lookup and always create

        Returns:
            Tuple of (handle, created)
        """
        with self._lock:
            if not force_new:
                existing = self._find_live(key)
                if existing is not None:
                    return existing, False

            handle = factory()
            if handle.key != key:
                raise ValueError(f"Factory built handle for {handle.key}, expected {key}")
            self._handles.append(handle)
            return handle, True

    def find(self, key: SessionKey) -> Optional[SessionHandle]:
        with self._lock:
            return self._find_live(key)

    def remove(self, session: Session) -> Optional[SessionHandle]:
        """Forget the handle owning ``session``; returns it, or None if unknown."""
        with self._lock:
            for index, handle in enumerate(self._handles):
                if handle.session is session:
                    del self._handles[index]
                    return handle
        return None

    def connections(self, host: str = "", username: str = "") -> list[SessionHandle]:
        """Live handles, filtered by exact host/username when a filter is given."""
        with self._lock:
            self._prune()
            return [
                h for h in self._handles
                if (not host or h.host == host) and (not username or h.username == username)
            ]

    def clear(self) -> None:
        with self._lock:
            self._handles.clear()

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._handles)

    def _find_live(self, key: SessionKey) -> Optional[SessionHandle]:
        self._prune()
        for handle in self._handles:
            if handle.key == key:
                return handle
        return None

    def _prune(self) -> None:
        """Drop handles whose session closed without a notification reaching us."""
        stale = [h for h in self._handles if h.session.state == SessionState.ABSENT]
        for handle in stale:
            logger.debug(f"Dropping stale handle {handle!r}")
            self._handles.remove(handle)
