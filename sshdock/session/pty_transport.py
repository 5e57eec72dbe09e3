"""
Pseudo-terminal backends for local shell sessions.

POSIX systems use ``pty.openpty`` with a subprocess on the slave side;
Windows uses ConPTY through pywinpty. Both expose the same small API:
spawn, non-blocking read, write, resize, close.
"""

from __future__ import annotations
import os
import sys
import subprocess
import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == 'win32'

if IS_WINDOWS:
    try:
        from winpty import PTY as WinPTY
        HAS_WINPTY = True
    except ImportError:
        HAS_WINPTY = False
        logger.warning("pywinpty is missing, local shells are disabled")
else:
    import errno
    import fcntl
    import pty
    import select
    import struct
    import termios
    HAS_WINPTY = False

# Seconds to wait for a terminated shell before killing it
TERMINATE_GRACE = 1.0


class PTYTransport(ABC):
    """A child process attached to a pseudo-terminal."""

    @abstractmethod
    def spawn(self, command: list[str], env: dict = None) -> None:
        """
        Start ``command`` on a new pseudo-terminal.

        Args:
            command: Program and arguments
            env: Extra environment variables
        """
        pass

    @abstractmethod
    def read(self, size: int = 4096) -> bytes:
        """Whatever output is ready, or b'' (never blocks)."""
        pass

    @abstractmethod
    def write(self, data: bytes) -> int:
        pass

    @abstractmethod
    def resize(self, cols: int, rows: int) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the terminal and stop the child."""
        pass

    @property
    @abstractmethod
    def is_alive(self) -> bool:
        pass

    @property
    @abstractmethod
    def exit_code(self) -> Optional[int]:
        pass


def _child_env(extra: Optional[dict]) -> dict:
    env = dict(os.environ)
    env.update(extra or {})
    env.setdefault('TERM', 'xterm-256color')
    return env


class UnixPTY(PTYTransport):
    """openpty() master kept here, slave handed to the child as stdio."""

    def __init__(self):
        self._fd: Optional[int] = None
        self._child: Optional[subprocess.Popen] = None
        self._returncode: Optional[int] = None

    def spawn(self, command: list[str], env: dict = None) -> None:
        master, slave = pty.openpty()

        def acquire_tty():
            # New session from start_new_session; stdin is the slave.
            # ssh reads passwords from /dev/tty, so it must be ours.
            try:
                fcntl.ioctl(0, termios.TIOCSCTTY, 0)
            except OSError:
                pass

        try:
            self._child = subprocess.Popen(
                command,
                stdin=slave,
                stdout=slave,
                stderr=slave,
                env=_child_env(env),
                start_new_session=True,
                preexec_fn=acquire_tty,
                close_fds=True,
            )
        except OSError:
            os.close(master)
            raise
        finally:
            os.close(slave)

        os.set_blocking(master, False)
        self._fd = master
        logger.debug(f"Shell started, pid {self._child.pid}: {' '.join(command)}")

    def read(self, size: int = 4096) -> bytes:
        if self._fd is None:
            return b''
        try:
            ready, _, _ = select.select([self._fd], [], [], 0)
            return os.read(self._fd, size) if ready else b''
        except (BlockingIOError, InterruptedError):
            return b''
        except OSError as e:
            # Linux reports EIO on the master once the slave side is gone
            if e.errno == errno.EIO:
                self._poll()
            return b''

    def write(self, data: bytes) -> int:
        if self._fd is None:
            return 0
        try:
            return os.write(self._fd, data)
        except OSError as e:
            logger.warning(f"Cannot write to shell: {e}")
            return 0

    def resize(self, cols: int, rows: int) -> None:
        if self._fd is None:
            return
        try:
            fcntl.ioctl(self._fd, termios.TIOCSWINSZ, struct.pack('HHHH', rows, cols, 0, 0))
        except OSError as e:
            logger.warning(f"Cannot resize terminal: {e}")

    def close(self) -> None:
        fd, self._fd = self._fd, None
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass

        child = self._child
        if child is None or child.poll() is not None:
            self._poll()
            return
        try:
            child.terminate()
            child.wait(timeout=TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            logger.debug(f"pid {child.pid} ignored SIGTERM, killing")
            child.kill()
            child.wait()
        except OSError:
            pass
        self._poll()

    def _poll(self) -> None:
        if self._child is not None and self._returncode is None:
            self._returncode = self._child.poll()

    @property
    def is_alive(self) -> bool:
        return self._child is not None and self._child.poll() is None

    @property
    def exit_code(self) -> Optional[int]:
        self._poll()
        return self._returncode


class WindowsPTY(PTYTransport):
    """ConPTY via pywinpty (Windows 10 1809 or later)."""

    def __init__(self, cols: int = 120, rows: int = 40):
        if not HAS_WINPTY:
            raise RuntimeError("Local shells on Windows need pywinpty (pip install pywinpty)")
        self._conpty = None
        self._returncode: Optional[int] = None
        self._size = (cols, rows)

    def spawn(self, command: list[str], env: dict = None) -> None:
        cols, rows = self._size
        line = subprocess.list2cmdline(command)
        self._conpty = WinPTY(cols=cols, rows=rows)
        self._conpty.spawn(line, env=_child_env(env))
        logger.debug(f"Shell started: {line}")

    def read(self, size: int = 4096) -> bytes:
        if self._conpty is None:
            return b''
        try:
            chunk = self._conpty.read(size, blocking=False)
        except Exception as e:
            logger.debug(f"ConPTY read failed: {e}")
            return b''
        if isinstance(chunk, str):
            chunk = chunk.encode('utf-8', errors='replace')
        return chunk or b''

    def write(self, data: bytes) -> int:
        if self._conpty is None:
            return 0
        try:
            self._conpty.write(data.decode('utf-8', errors='replace'))
        except Exception as e:
            logger.debug(f"ConPTY write failed: {e}")
            return 0
        return len(data)

    def resize(self, cols: int, rows: int) -> None:
        self._size = (cols, rows)
        if self._conpty is None:
            return
        try:
            self._conpty.set_size(cols, rows)
        except Exception as e:
            logger.warning(f"Cannot resize terminal: {e}")

    def close(self) -> None:
        conpty, self._conpty = self._conpty, None
        if conpty is None:
            return
        try:
            if not conpty.isalive():
                self._returncode = conpty.get_exitstatus()
            conpty.close()
        except Exception as e:
            logger.debug(f"ConPTY close failed: {e}")

    @property
    def is_alive(self) -> bool:
        try:
            return self._conpty is not None and self._conpty.isalive()
        except Exception:
            return False

    @property
    def exit_code(self) -> Optional[int]:
        if self._returncode is None and self._conpty is not None and not self.is_alive:
            try:
                self._returncode = self._conpty.get_exitstatus()
            except Exception:
                pass
        return self._returncode


def create_pty() -> PTYTransport:
    """
    PTY backend for this platform.

    Raises:
        RuntimeError: Windows without pywinpty
    """
    return WindowsPTY() if IS_WINDOWS else UnixPTY()


def is_pty_available() -> bool:
    return HAS_WINPTY if IS_WINDOWS else True
