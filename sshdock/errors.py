"""
Exception hierarchy for sshdock.

Configuration errors abort a catalog reload. Connect errors abort a
single connection attempt. Neither is fatal for the process.
"""

from __future__ import annotations


class SSHDockError(Exception):
    """Base class for all sshdock errors."""


class ConfigError(SSHDockError):
    """Host configuration could not be loaded."""


class ConfigMalformedError(ConfigError):
    """Host definitions are not a sequence of objects."""

    def __init__(self, message: str, source: str = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class ConnectError(SSHDockError):
    """A connection attempt failed before a session was created."""

    def __init__(self, message: str, server_name: str = None):
        self.server_name = server_name
        super().__init__(message)


class UnknownServerError(ConnectError):
    """No server with the requested name is configured."""

    def __init__(self, server_name: str):
        super().__init__(f"Unknown server '{server_name}'", server_name)


class IncompleteConfigError(ConnectError):
    """The server has no host or no username."""

    def __init__(self, server_name: str, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Server '{server_name}' is missing: {', '.join(self.missing)}",
            server_name,
        )
