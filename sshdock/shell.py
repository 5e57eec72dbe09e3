"""
UI shell interface.

The orchestration core talks to the user only through this interface.
Prompts are blocking: each call returns once the user answered or
cancelled (``None``).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

from .session.base import Session

# Returns None when the text is acceptable, otherwise the error to display
Validator = Callable[[str], Optional[str]]


class UIShell(ABC):
    """Pickers, prompts, notifications and session hosting."""

    @abstractmethod
    def pick(self, items: Sequence[str], placeholder: str = "") -> Optional[str]:
        """Single-select list. Returns the chosen item or None."""
        pass

    @abstractmethod
    def prompt(
        self,
        prompt: str,
        validate: Optional[Validator] = None,
        ignore_focus_out: bool = True,
    ) -> Optional[str]:
        """Single-line input. Returns the text, or None when cancelled."""
        pass

    @abstractmethod
    def show_info(self, message: str, *buttons: str) -> Optional[str]:
        """Informational message; returns the clicked button, if any."""
        pass

    @abstractmethod
    def show_error(self, message: str, *buttons: str) -> Optional[str]:
        """Error message; returns the clicked button, if any."""
        pass

    @abstractmethod
    def create_session(self, title: str) -> Session:
        """Open a new local shell session. It is started but not shown."""
        pass

    def set_fast_open(self, label: Optional[str]) -> None:
        """Show the fast-open indicator with ``label``, or hide it for None."""
        pass
