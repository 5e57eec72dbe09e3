"""
Abstract session interface.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Callable


class SessionState(Enum):
    """Session lifecycle states (per registry key: ABSENT -> CREATING -> ACTIVE -> ABSENT)."""
    ABSENT = auto()
    CREATING = auto()
    ACTIVE = auto()


@dataclass
class SessionEvent:
    """Base class for session events."""
    pass


@dataclass
class DataReceived(SessionEvent):
    """Output from the shell."""
    data: bytes


@dataclass
class StateChanged(SessionEvent):
    """Session state changed."""
    old_state: SessionState
    new_state: SessionState
    message: str = ""


@dataclass
class SessionClosed(SessionEvent):
    """The shell is gone, for whatever reason."""
    message: str = ""


class Session(ABC):
    """
    Abstract interactive shell hosted by the UI shell.

    The orchestrator only ever injects lines of text; it never waits for
    output or for the shell to become ready.
    """

    @property
    @abstractmethod
    def title(self) -> str:
        """Label shown by the UI shell."""
        pass

    @property
    @abstractmethod
    def state(self) -> SessionState:
        """Current session state."""
        pass

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    @abstractmethod
    def show(self) -> None:
        """Bring the session to the foreground."""
        pass

    @abstractmethod
    def send_text(self, line: str) -> None:
        """Inject one line of input."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Terminate the shell."""
        pass

    @abstractmethod
    def set_event_handler(self, handler: Optional[Callable[[SessionEvent], None]]) -> None:
        """Set callback for session events."""
        pass
