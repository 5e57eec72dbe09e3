"""
sshdock/cli.py

Command-line interface for sshdock.

Usage:
    sshdock-cli hosts
    sshdock-cli plan alpha
    sshdock-cli plan alpha --forward "-L 9000:localhost:9000"
    sshdock-cli project ~/work/site/index.php
    sshdock-cli check-forward localhost:9000 --domain-required
    sshdock-cli forward alpha

``plan`` and ``forward`` are dry runs: they print the lines a new
session would receive instead of opening a shell.
"""

import sys
import json
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

import click

from .app import SSHDock
from .config import SettingsManager, get_settings_manager
from .forwarding.wizard import validate_address
from .session.base import Session, SessionState, SessionEvent
from .shell import UIShell, Validator


class RecordingSession(Session):
    """Session that keeps the lines it is sent instead of running a shell."""

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


class ConsoleShell(UIShell):
    """UI shell on stdin/stdout. Sessions are recorded, never spawned."""

    def __init__(self):
        self.sessions: list[RecordingSession] = []

    def pick(self, items: Sequence[str], placeholder: str = "") -> Optional[str]:
        if not items:
            return None
        click.echo(placeholder or "Select:")
        for index, item in enumerate(items, 1):
            click.echo(f"  {index}) {item}")
        choice = click.prompt("Number (empty to cancel)", default="", show_default=False)
        if not choice.strip():
            return None
        try:
            return items[int(choice) - 1]
        except (ValueError, IndexError):
            click.echo(f"Invalid choice: {choice}", err=True)
            return None

    def prompt(
        self,
        prompt: str,
        validate: Optional[Validator] = None,
        ignore_focus_out: bool = True,
    ) -> Optional[str]:
        while True:
            text = click.prompt(prompt, default="", show_default=False)
            if not text:
                return None
            error = validate(text) if validate else None
            if error is None:
                return text
            click.echo(error, err=True)

    def show_info(self, message: str, *buttons: str) -> Optional[str]:
        return self._message(message, buttons)

    def show_error(self, message: str, *buttons: str) -> Optional[str]:
        return self._message(message, buttons, err=True)

    def _message(self, message: str, buttons: Sequence[str], err: bool = False) -> Optional[str]:
        click.echo(message, err=err)
        if not buttons:
            return None
        if not sys.stdin.isatty():
            return None
        if len(buttons) == 1:
            return buttons[0] if click.confirm(f"{buttons[0]}?", default=False) else None
        return self.pick(list(buttons), "")

    def create_session(self, title: str) -> Session:
        session = RecordingSession(title)
        self.sessions.append(session)
        return session


def build_app(config: Optional[str]) -> tuple[SSHDock, ConsoleShell]:
    manager = SettingsManager(Path(config)) if config else get_settings_manager()
    shell = ConsoleShell()
    app = SSHDock(shell, manager)
    app.reload()
    return app, shell


def print_lines(ctx, session: Optional[RecordingSession]) -> None:
    if session is None:
        return
    if ctx.obj["json"]:
        click.echo(json.dumps({"title": session.title, "lines": session.lines}, indent=2))
    else:
        click.echo(f"# {session.title}")
        for line in session.lines:
            click.echo(line)


@click.group()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("-c", "--config", default=None, help="Settings file (default ~/.sshdock/config.json)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, output_json, config, verbose):
    """sshdock command-line interface for servers and forwarding."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["json"] = output_json
    ctx.obj["config"] = config


@cli.command("hosts")
@click.pass_context
def list_hosts(ctx):
    """List configured servers."""
    app, _ = build_app(ctx.obj["config"])

    rows = []
    for entry in app.catalog:
        config = entry.config
        rows.append({
            "name": entry.name,
            "host": config.host,
            "username": config.username,
            "port": config.port,
            "usable": not config.missing_fields(),
        })

    if ctx.obj["json"]:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No servers.")
        return
    for row in rows:
        flag = "" if row["usable"] else "  (incomplete)"
        port = f":{row['port']}" if row["port"] else ""
        click.echo(f"{row['name']:<25} {row['username'] or '?'}@{row['host'] or '?'}{port}{flag}")
    click.echo(f"\n{len(rows)} server(s)")


@cli.command("plan")
@click.argument("name")
@click.option("-f", "--forward", default=None, help="Forwarding spec, e.g. '-L 9000:localhost:9000'")
@click.option("--fast", "fast_file", default=None, help="Treat as fast open for this local file")
@click.pass_context
def plan(ctx, name, forward, fast_file):
    """Print the lines a new session for NAME would receive."""
    app, shell = build_app(ctx.obj["config"])

    if fast_file:
        app.active_file_changed(fast_file)
        if app.orchestrator.fast_open_server != name:
            click.echo(f"'{fast_file}' is not in a project of '{name}'.", err=True)
            sys.exit(1)

    outcome = app.connect(name, is_fast_path=bool(fast_file), forwarding=forward)
    if outcome is None:
        click.echo("\n".join(app.raw_output.lines), err=True)
        sys.exit(1)
    print_lines(ctx, outcome.session)


@cli.command("project")
@click.argument("file_path")
@click.pass_context
def project(ctx, file_path):
    """Show which server project contains FILE_PATH."""
    app, _ = build_app(ctx.obj["config"])
    match = app.orchestrator.update_active_file(file_path)

    if ctx.obj["json"]:
        data = {"server": match.server_name, "remote_dir": match.remote_dir} if match else None
        click.echo(json.dumps(data))
    elif match:
        click.echo(f"{file_path} -> {match.server_name}:{match.remote_dir}")
    else:
        click.echo(f"No server project contains {file_path}")


@cli.command("check-forward")
@click.argument("address")
@click.option("-d", "--domain-required", is_flag=True, help="Require the host part")
def check_forward(address, domain_required):
    """Validate a forwarding address ([host:]port)."""
    error = validate_address(address, domain_required)
    if error:
        click.echo(error, err=True)
        sys.exit(1)
    click.echo("ok")


@cli.command("forward")
@click.argument("name")
@click.pass_context
def forward(ctx, name):
    """Run the port forwarding wizard for NAME and print the session plan."""
    app, shell = build_app(ctx.obj["config"])
    outcome = app.port_forwarding(name)
    if outcome is None:
        sys.exit(1)
    print_lines(ctx, outcome.session)


def main():
    """Entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
