"""
Shared fixtures: a scripted UI shell and isolated settings.
"""

from collections import deque
from typing import Callable, Optional, Sequence

import pytest

from sshdock.app import SSHDock
from sshdock.config import SettingsManager
from sshdock.output import OutputLog
from sshdock.session.base import Session, SessionState, SessionEvent
from sshdock.shell import UIShell


class FakeSession(Session):
    """Records injected lines and show() calls."""

    def __init__(self, title: str):
        self._title = title
        self._state = SessionState.ACTIVE
        self.lines: list[str] = []
        self.shown = 0

    @property
    def title(self) -> str:
        return self._title

    @property
    def state(self) -> SessionState:
        return self._state

    def show(self) -> None:
        self.shown += 1

    def send_text(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        self._state = SessionState.ABSENT

    def set_event_handler(self, handler: Optional[Callable[[SessionEvent], None]]) -> None:
        pass


class FakeShell(UIShell):
    """
    UI shell answering from queues.

    ``picks``, ``prompts`` and ``answers`` are consumed in order; an
    exhausted queue answers None (the user cancelled).
    """

    def __init__(self, picks=(), prompts=(), answers=()):
        self.picks = deque(picks)
        self.prompts = deque(prompts)
        self.answers = deque(answers)
        self.sessions: list[FakeSession] = []
        self.pick_calls: list[tuple[list[str], str]] = []
        self.prompt_calls: list[str] = []
        self.validation_errors: list[str] = []
        self.infos: list[tuple[str, tuple]] = []
        self.errors: list[tuple[str, tuple]] = []
        self.fast_open_label: Optional[str] = None

    def pick(self, items: Sequence[str], placeholder: str = "") -> Optional[str]:
        self.pick_calls.append((list(items), placeholder))
        return self.picks.popleft() if self.picks else None

    def prompt(self, prompt, validate=None, ignore_focus_out=True):
        self.prompt_calls.append(prompt)
        while self.prompts:
            text = self.prompts.popleft()
            if text is None:
                return None
            error = validate(text) if validate else None
            if error is None:
                return text
            self.validation_errors.append(error)
        return None

    def show_info(self, message: str, *buttons: str) -> Optional[str]:
        self.infos.append((message, buttons))
        return self.answers.popleft() if self.answers else None

    def show_error(self, message: str, *buttons: str) -> Optional[str]:
        self.errors.append((message, buttons))
        return self.answers.popleft() if self.answers else None

    def create_session(self, title: str) -> Session:
        session = FakeSession(title)
        self.sessions.append(session)
        return session

    def set_fast_open(self, label: Optional[str]) -> None:
        self.fast_open_label = label


ALPHA = {"name": "alpha", "host": "host", "username": "user", "password": "p"}


@pytest.fixture
def settings_manager(tmp_path):
    manager = SettingsManager(tmp_path / "config.json")
    manager.settings.hosts_files = []
    return manager


@pytest.fixture
def shell():
    return FakeShell()


@pytest.fixture
def make_app(settings_manager):
    """Build an SSHDock over a FakeShell, preloaded with host dicts."""

    def factory(servers=(ALPHA,), shell: FakeShell = None) -> SSHDock:
        app = SSHDock(shell or FakeShell(), settings_manager, OutputLog())
        app.reload(list(servers))
        return app

    return factory
