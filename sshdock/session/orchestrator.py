"""
Connection orchestration.

Given a server name (and optionally a forwarding spec), reuse the live
session for it or open a new local shell and type the connection
sequence into it:

    curl <knock host>:<knock port>      # port knocking, when configured
    ssh [<forwarding>] <host> -l <user> [-p <port>] [-i "<key>"]
    <password>                          # password auth only
    cd <remote dir>                     # when opening the project directory
    <custom commands joined with &&>

Nothing here waits on the remote side; every line is fire-and-forget.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import AppSettings, SettingsManager
from ..errors import IncompleteConfigError, UnknownServerError
from ..hosts.catalog import ServerCatalog
from ..hosts.models import ResolvedHost
from ..hosts.project_map import ProjectMatch, ProjectPathMapper
from ..output import LogSink
from .auth import AuthPlan, AuthResolver
from .base import Session
from .registry import SessionHandle, SessionRegistry

if TYPE_CHECKING:
    from ..shell import UIShell

logger = logging.getLogger(__name__)

COMMAND_SEPARATOR = " && "
FORWARDING_SUFFIX = " (Forwarding)"


@dataclass(frozen=True)
class SessionOutcome:
    handle: SessionHandle
    created: bool

    @property
    def session(self) -> Session:
        return self.handle.session


def build_ssh_command(config: ResolvedHost, plan: AuthPlan, forwarding: Optional[str] = None) -> str:
    """Base ssh command; the forwarding fragment goes right before the host."""
    parts = ["ssh"]
    if forwarding is not None:
        parts.append(forwarding)
    parts.extend([config.host, "-l", config.username])
    parts.extend(plan.flags)
    return " ".join(parts)


class ConnectionOrchestrator:
    """
    Opens or reuses sessions for catalog servers.

    Args:
        catalog: Server catalog (read live on every call)
        registry: Live session registry
        shell: UI shell that hosts sessions
        settings: Settings manager; read on every call so changes apply
            without rebuilding the orchestrator
        output: Timestamped log sink
        auth: Authentication resolver
    """

    def __init__(
        self,
        catalog: ServerCatalog,
        registry: SessionRegistry,
        shell: UIShell,
        settings: SettingsManager,
        output: LogSink,
        auth: AuthResolver = None,
    ):
        self.catalog = catalog
        self.registry = registry
        self.shell = shell
        self.settings_manager = settings
        self.output = output
        self.auth = auth or AuthResolver()
        self.mapper = ProjectPathMapper(catalog)

        # Last fast-open resolution (server + remote project directory)
        self.fast_open: Optional[ProjectMatch] = None

    @property
    def settings(self) -> AppSettings:
        return self.settings_manager.settings

    # -------------------------------------------------------------------------
    # Fast open
    # -------------------------------------------------------------------------

    def update_active_file(self, file_path: Optional[str]) -> Optional[ProjectMatch]:
        """Recompute which server owns the active file."""
        self.fast_open = self.mapper.resolve(file_path) if file_path else None
        return self.fast_open

    @property
    def fast_open_server(self) -> Optional[str]:
        return self.fast_open.server_name if self.fast_open else None

    # -------------------------------------------------------------------------
    # Connecting
    # -------------------------------------------------------------------------

    def resolve_host(self, name: str) -> ResolvedHost:
        """
        Look up and validate a server.

        Raises:
            UnknownServerError: no such server
            IncompleteConfigError: host or username missing
        """
        entry = self.catalog.find(name)
        if entry is None:
            self.output.append_line(f"Server '{name}' is not configured.")
            raise UnknownServerError(name)

        try:
            return entry.config.resolve(entry.name)
        except IncompleteConfigError:
            host = entry.config.host
            self.output.append_line(f"Check host or username for '{host}'")
            self.output.append_line(
                f"A terminal with a session for '{host}' has been not started, "
                "because errors were found."
            )
            raise

    def plan_lines(
        self,
        config: ResolvedHost,
        is_fast_path: bool = False,
        forwarding: Optional[str] = None,
    ) -> list[str]:
        """Every line a new session receives, in order."""
        plan = self.auth.resolve(config)
        lines = []

        knock = config.port_knocking
        if knock is not None:
            lines.append(f"curl {knock.host}:{knock.port}")

        lines.append(build_ssh_command(config, plan, forwarding))

        if plan.injects_password:
            lines.append(plan.password)

        if self.settings.open_project_catalog:
            if is_fast_path:
                if self.fast_open is not None:
                    lines.append(f"cd {self.fast_open.remote_dir}")
            elif config.path is not None:
                lines.append(f"cd {config.path}")

        commands = config.custom_commands or self.settings.custom_commands
        if commands:
            lines.append(COMMAND_SEPARATOR.join(commands))

        return lines

    def connect(
        self,
        name: str,
        is_fast_path: bool = False,
        forwarding: Optional[str] = None,
    ) -> SessionOutcome:
        """
        Show the session for ``name``, creating it when needed.

        Forwarding sessions are always reused per server; plain sessions
        are reused unless ``allow_multiple_connections`` is enabled.

        Raises:
            UnknownServerError: no such server
            IncompleteConfigError: host or username missing
        """
        config = self.resolve_host(name)
        is_forwarding = forwarding is not None
        force_new = self.settings.allow_multiple_connections and not is_forwarding

        def create() -> SessionHandle:
            self.output.append_line(f"New terminal session initialization for '{config.host}'...")
            title = name + (FORWARDING_SUFFIX if is_forwarding else "")
            session = self.shell.create_session(title)
            return SessionHandle(
                name=name,
                username=config.username,
                host=config.host,
                is_forwarding=is_forwarding,
                session=session,
            )

        handle, created = self.registry.get_or_create((name, is_forwarding), create, force_new)

        if created:
            for line in self.plan_lines(config, is_fast_path, forwarding):
                handle.session.send_text(line)

        handle.session.show()
        state = "created and displayed" if created else "displayed."
        self.output.append_line(f"A terminal with a session for '{config.host}' has been {state}")
        return SessionOutcome(handle=handle, created=created)

    def on_session_closed(self, session: Session) -> Optional[SessionHandle]:
        """Forget a session closed by the user or by its process exiting."""
        handle = self.registry.remove(session)
        if handle is not None:
            self.output.append_line(
                f"A terminal with a session for '{handle.host}' has been killed."
            )
        return handle

    def connections(self, host: str = "", username: str = "") -> list[SessionHandle]:
        return self.registry.connections(host, username)
