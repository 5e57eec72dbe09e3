"""
Local shell session.

A PTY-backed instance of the user's shell. The orchestrator types the
ssh command line into it, exactly as a user would.
"""

import os
import threading
import time
import logging
from typing import Optional, Callable, List

from .pty_transport import create_pty, is_pty_available, PTYTransport, IS_WINDOWS
from .base import Session, SessionState, SessionEvent, DataReceived, StateChanged, SessionClosed

logger = logging.getLogger(__name__)

# Carriage return is what a terminal sends for Enter
LINE_ENDING = "\r"


class LocalTerminal(Session):
    """
    Local PTY session running a shell.

    Lines sent before the shell is up are queued and flushed once the
    PTY exists; callers never wait for readiness.

    Usage:
        session = LocalTerminal("alpha")
        session.set_event_handler(on_event)
        session.connect()
        session.send_text("ssh alpha.example.com -l me")
    """

    def __init__(self, title: str, command: Optional[List[str]] = None):
        """
        Args:
            title: Label for the UI shell
            command: Command to run. Defaults to user's shell.
        """
        self._title = title
        self._command = command or self._default_shell()
        self._pty: Optional[PTYTransport] = None
        self._state = SessionState.CREATING
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._pending: list[bytes] = []
        self._handler: Optional[Callable[[SessionEvent], None]] = None
        self._show_handler: Optional[Callable[[], None]] = None
        self._cols, self._rows = 120, 40

    @staticmethod
    def _default_shell() -> List[str]:
        """Get user's default shell."""
        if IS_WINDOWS:
            return [os.environ.get('COMSPEC', 'cmd.exe')]
        return [os.environ.get('SHELL', '/bin/bash')]

    # -------------------------------------------------------------------------
    # Session interface
    # -------------------------------------------------------------------------

    @property
    def title(self) -> str:
        return self._title

    @property
    def state(self) -> SessionState:
        return self._state

    def set_event_handler(self, handler: Optional[Callable[[SessionEvent], None]]) -> None:
        self._handler = handler

    def set_show_handler(self, handler: Optional[Callable[[], None]]) -> None:
        """Callback used by ``show()``; the hosting UI decides what showing means."""
        self._show_handler = handler

    def show(self) -> None:
        if self._show_handler:
            self._show_handler()

    def send_text(self, line: str) -> None:
        self.write((line + LINE_ENDING).encode('utf-8'))

    def write(self, data: bytes) -> None:
        """Send raw input, queueing it until the PTY exists. Order is preserved."""
        with self._lock:
            if self._pty is None:
                self._pending.append(data)
                return
            self._pty.write(data)

    def resize(self, cols: int, rows: int) -> None:
        self._cols, self._rows = cols, rows
        if self._pty:
            self._pty.resize(cols, rows)

    def connect(self) -> None:
        """Start the shell process."""
        if not is_pty_available():
            self._set_state(SessionState.ABSENT, "PTY unavailable. On Windows, install pywinpty.")
            self._emit(SessionClosed("PTY unavailable"))
            return
        self._stop.clear()
        threading.Thread(target=self._run, daemon=True, name=f"pty-{self._title}").start()

    def close(self) -> None:
        """Terminate the process."""
        if self._state == SessionState.ABSENT:
            return
        self._stop.set()
        with self._lock:
            pty_, self._pty = self._pty, None
        if pty_:
            pty_.close()
        self._set_state(SessionState.ABSENT, "Closed")
        self._emit(SessionClosed("Closed"))

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _emit(self, event: SessionEvent) -> None:
        if self._handler:
            try:
                self._handler(event)
            except Exception as e:
                logger.exception(f"Event handler error: {e}")

    def _set_state(self, state: SessionState, msg: str = ""):
        old, self._state = self._state, state
        logger.debug(f"LocalTerminal[{self._title}]: {old.name} -> {state.name} {msg}")
        self._emit(StateChanged(old, state, msg))

    def _run(self):
        """Main PTY read loop (runs in thread)."""
        try:
            logger.info(f"Spawning: {' '.join(self._command)}")
            transport = create_pty()
            transport.spawn(self._command)
            transport.resize(self._cols, self._rows)

            with self._lock:
                if self._stop.is_set():
                    # Closed while spawning
                    transport.close()
                    return
                # Queued lines go out before any later write can reach the PTY
                for data in self._pending:
                    transport.write(data)
                self._pending = []
                self._pty = transport

            self._set_state(SessionState.ACTIVE)

            while not self._stop.is_set() and transport.is_alive:
                data = transport.read(8192)
                if data:
                    self._emit(DataReceived(data))
                else:
                    time.sleep(0.01)

            # Process exited on its own
            if not self._stop.is_set():
                exit_code = transport.exit_code
                msg = f"Process exited (code {exit_code})" if exit_code is not None else "Process exited"
                with self._lock:
                    self._pty = None
                transport.close()
                self._set_state(SessionState.ABSENT, msg)
                self._emit(SessionClosed(msg))

        except Exception as e:
            logger.exception("LocalTerminal failed")
            with self._lock:
                self._pty = None
            self._set_state(SessionState.ABSENT, str(e))
            self._emit(SessionClosed(str(e)))

