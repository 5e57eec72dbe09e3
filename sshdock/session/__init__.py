"""
Session management - registry, authentication plan and orchestration.

Sessions are local shells (LocalTerminal) into which the orchestrator
types the ssh command line; the transport itself is the system's ssh
binary.
"""

from .base import (
    Session,
    SessionState,
    SessionEvent,
    DataReceived,
    StateChanged,
    SessionClosed,
)
from .registry import SessionHandle, SessionRegistry
from .auth import AuthMethod, AuthPlan, AuthResolver, port_flags
from .orchestrator import ConnectionOrchestrator, SessionOutcome, build_ssh_command
from .local_terminal import LocalTerminal
from .pty_transport import PTYTransport, create_pty, is_pty_available, IS_WINDOWS

__all__ = [
    # Base classes
    "Session",
    "SessionState",
    "SessionEvent",
    "DataReceived",
    "StateChanged",
    "SessionClosed",
    # Registry
    "SessionHandle",
    "SessionRegistry",
    # Auth
    "AuthMethod",
    "AuthPlan",
    "AuthResolver",
    "port_flags",
    # Orchestration
    "ConnectionOrchestrator",
    "SessionOutcome",
    "build_ssh_command",
    # Local shells
    "LocalTerminal",
    "PTYTransport",
    "create_pty",
    "is_pty_available",
    "IS_WINDOWS",
]
