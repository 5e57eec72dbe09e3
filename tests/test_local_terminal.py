"""Tests for LocalTerminal input queueing, with a fake PTY backend."""

import threading
import time

import pytest

from sshdock.session import local_terminal, pty_transport
from sshdock.session.base import SessionState
from sshdock.session.local_terminal import LocalTerminal
from sshdock.session.pty_transport import PTYTransport


class SlowPTY(PTYTransport):
    """Records writes; the first write stalls so other writers can pile up."""

    def __init__(self, stall: float = 0.3):
        self.writes: list[bytes] = []
        self.first_write_started = threading.Event()
        self._stall = stall
        self._alive = True

    def spawn(self, command, env=None):
        pass

    def read(self, size=4096):
        return b''

    def write(self, data):
        if not self.first_write_started.is_set():
            self.first_write_started.set()
            time.sleep(self._stall)
        self.writes.append(data)
        return len(data)

    def resize(self, cols, rows):
        pass

    def close(self):
        self._alive = False

    @property
    def is_alive(self):
        return self._alive

    @property
    def exit_code(self):
        return None


@pytest.fixture
def fake_pty(monkeypatch):
    pty_ = SlowPTY()
    monkeypatch.setattr(local_terminal, "create_pty", lambda: pty_)
    monkeypatch.setattr(local_terminal, "is_pty_available", lambda: True)
    return pty_


def wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)


def test_queued_lines_precede_later_writes(fake_pty):
    session = LocalTerminal("alpha", command=["sh"])
    session.send_text("ssh host -l user")
    session.send_text("p")
    session.connect()

    assert fake_pty.first_write_started.wait(5)
    session.send_text("cd /srv")

    wait_for(lambda: len(fake_pty.writes) == 3)
    assert fake_pty.writes == [b"ssh host -l user\r", b"p\r", b"cd /srv\r"]
    session.close()


def test_session_becomes_active_then_closes(fake_pty):
    session = LocalTerminal("alpha", command=["sh"])
    session.connect()
    wait_for(lambda: session.state == SessionState.ACTIVE)

    closed = []
    session.set_event_handler(closed.append)
    session.close()
    assert session.state == SessionState.ABSENT
    assert not fake_pty.is_alive
    assert closed


@pytest.mark.skipif(pty_transport.IS_WINDOWS, reason="POSIX pseudo-terminal")
def test_unix_pty_close_stops_child():
    transport = pty_transport.UnixPTY()
    transport.spawn(["sh", "-c", "sleep 30"])
    assert transport.is_alive

    transport.close()
    assert not transport.is_alive
    assert transport.exit_code is not None
    assert transport.read() == b''
