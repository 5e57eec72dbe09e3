"""
sshdock - open SSH sessions to configured servers from a desktop shell.

- Server catalog loaded from YAML/JSON host files and ~/.ssh/config
- Session reuse per server, or one terminal per connection
- Agent, private key or password authentication
- Port forwarding wizard (-L / -R / -D) with recently used specs
- Fast open: connect to the server whose project holds the active file

The core is UI-agnostic; ``sshdock.ui`` provides the PyQt6 shell and
``sshdock.cli`` a click-based console.
"""

__version__ = "0.1.0"

from .app import SSHDock
from .config import AppSettings, SettingsManager, get_settings_manager
from .errors import (
    SSHDockError,
    ConfigError,
    ConfigMalformedError,
    ConnectError,
    UnknownServerError,
    IncompleteConfigError,
)
from .hosts import HostConfig, ResolvedHost, ServerCatalog, ProjectPathMapper
from .session import (
    AuthMethod,
    AuthResolver,
    ConnectionOrchestrator,
    SessionHandle,
    SessionRegistry,
)
from .forwarding import ForwardingWizard, validate_address, build_spec
from .output import OutputLog, TimestampedLog
from .shell import UIShell

__all__ = [
    "SSHDock",
    # Settings
    "AppSettings",
    "SettingsManager",
    "get_settings_manager",
    # Errors
    "SSHDockError",
    "ConfigError",
    "ConfigMalformedError",
    "ConnectError",
    "UnknownServerError",
    "IncompleteConfigError",
    # Hosts
    "HostConfig",
    "ResolvedHost",
    "ServerCatalog",
    "ProjectPathMapper",
    # Sessions
    "AuthMethod",
    "AuthResolver",
    "ConnectionOrchestrator",
    "SessionHandle",
    "SessionRegistry",
    # Forwarding
    "ForwardingWizard",
    "validate_address",
    "build_spec",
    # Output
    "OutputLog",
    "TimestampedLog",
    "UIShell",
]
