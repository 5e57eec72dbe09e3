"""
sshdock application service.

Wires the catalog, registry, orchestrator and forwarding wizard to a UI
shell and exposes the user-facing commands:

- Open Connection: pick a server, connect
- Port Forwarding: pick a server, run the forwarding wizard, connect
- Fast Open Connection: connect to the server owning the active file

Usage:
    app = SSHDock(shell)
    app.start()
    app.open_connection()
    app.connections(host="10.0.0.1")
"""

from __future__ import annotations
import logging
import shutil
from typing import Any, Optional

from .config import SettingsManager, AppSettings, get_settings_manager
from .errors import ConfigError, ConnectError
from .forwarding.wizard import ForwardingWizard
from .hosts.catalog import ServerCatalog
from .hosts.loader import load_host_configs
from .output import LogSink, OutputLog, TimestampedLog
from .session.base import Session
from .session.orchestrator import ConnectionOrchestrator, SessionOutcome
from .session.registry import SessionHandle, SessionRegistry
from .shell import UIShell

logger = logging.getLogger(__name__)

CHECK_OUTPUT = "Check output"


class SSHDock:
    """
    Application service shared by the GUI and the CLI.

    Args:
        shell: UI shell used for prompts and sessions
        settings: Settings manager (defaults to the global one)
        output: Log sink; wrapped with timestamps
    """

    def __init__(
        self,
        shell: UIShell,
        settings: SettingsManager = None,
        output: LogSink = None,
    ):
        self.shell = shell
        self.settings_manager = settings or get_settings_manager()
        self.raw_output = output or OutputLog()
        self.output = TimestampedLog(self.raw_output)

        self.catalog = ServerCatalog()
        self.registry = SessionRegistry()
        self.orchestrator = ConnectionOrchestrator(
            self.catalog,
            self.registry,
            shell,
            self.settings_manager,
            self.output,
        )
        self._active_file: Optional[str] = None
        self._started = False

    @property
    def settings(self) -> AppSettings:
        return self.settings_manager.settings

    def start(self) -> None:
        """Check for ssh, load the catalog and follow settings changes."""
        if self._started:
            return
        self._started = True
        self.check_ssh_executable()
        self.reload()
        self.settings_manager.add_listener(lambda _settings: self.reload())

    def check_ssh_executable(self) -> bool:
        found = shutil.which("ssh") is not None
        if found:
            self.output.append_line("Find ssh on your system.")
        else:
            self.output.append_line("Did not find ssh on your system.")
        self.output.append_line(
            "If you use a third-party terminal, then make sure that there is an SSH utility."
        )
        return found

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def load_server_configs(self) -> list[dict]:
        """
        Read every configured host source.

        Raises:
            ConfigError: a source exists but cannot be parsed
        """
        configs, messages = load_host_configs(
            self.settings.hosts_files,
            self.settings.ssh_config_import,
        )
        for message in messages:
            self.output.append_line(message)
        return configs

    def reload(self, raw_configs: Any = None) -> bool:
        """
        Rebuild the catalog from the host sources (or ``raw_configs``).

        On failure the catalog is left empty rather than stale.

        Returns:
            True if the catalog was loaded
        """
        try:
            if raw_configs is None:
                raw_configs = self.load_server_configs()
            self.catalog.reload(raw_configs, self.settings.show_hosts_in_pick_lists)
        except ConfigError as e:
            self.catalog.clear()
            logger.warning(f"Catalog reload failed: {e}")
            self.output.append_line(str(e))
            self.output.append_line("Unable to load server list, check configuration files.")
            self.refresh_fast_open()
            return False

        self.refresh_fast_open()
        return True

    # -------------------------------------------------------------------------
    # Editor / shell events
    # -------------------------------------------------------------------------

    def active_file_changed(self, file_path: Optional[str]) -> None:
        self._active_file = file_path
        self.refresh_fast_open()

    def refresh_fast_open(self) -> None:
        match = self.orchestrator.update_active_file(self._active_file)
        if match is not None:
            self.shell.set_fast_open(f"Open SSH on {match.server_name}")
        else:
            self.shell.set_fast_open(None)

    def session_closed(self, session: Session) -> None:
        self.orchestrator.on_session_closed(session)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def select_server(self) -> Optional[str]:
        if not self.catalog:
            self.shell.show_info("You don't have any servers")
            return None
        return self.shell.pick(self.catalog.list(), "Select the server to connect...")

    def open_connection(self, name: str = None) -> Optional[SessionOutcome]:
        name = name or self.select_server()
        if name is None:
            return None
        return self.connect(name)

    def port_forwarding(self, name: str = None) -> Optional[SessionOutcome]:
        name = name or self.select_server()
        if name is None:
            return None

        wizard = ForwardingWizard(self.shell, self.settings_manager)
        result = wizard.run()
        if result is None:
            return None

        outcome = self.connect(name, forwarding=result.spec)
        if not result.from_recent:
            wizard.offer_to_remember(result.spec)
        return outcome

    def fast_open_connection(self) -> Optional[SessionOutcome]:
        name = self.orchestrator.fast_open_server
        if name is None:
            self.output.append_line("No server project contains the active file.")
            return None
        return self.connect(name, is_fast_path=True)

    def connect(
        self,
        name: str,
        is_fast_path: bool = False,
        forwarding: Optional[str] = None,
    ) -> Optional[SessionOutcome]:
        """Connect, reporting failures to the user instead of raising."""
        try:
            return self.orchestrator.connect(name, is_fast_path, forwarding)
        except ConnectError as e:
            logger.warning(f"Connection to '{name}' not started: {e}")
            answer = self.shell.show_error(
                "Terminal has been not started, check output for more info.",
                CHECK_OUTPUT,
            )
            if answer == CHECK_OUTPUT:
                self.output.show()
            return None

    # -------------------------------------------------------------------------
    # Public query API
    # -------------------------------------------------------------------------

    def connections(self, host: str = "", username: str = "") -> list[SessionHandle]:
        """Active sessions, filtered by exact host / username when given."""
        return self.orchestrator.connections(host, username)
