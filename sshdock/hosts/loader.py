"""
Host definition sources.

Host files are YAML (JSON is accepted too, being valid YAML) whose top
level is a list of host objects. Files are merged in the order given.
Hosts can also be imported from an OpenSSH client config.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Optional

import paramiko
import yaml

from ..errors import ConfigMalformedError

logger = logging.getLogger(__name__)


def load_hosts_file(path: Path) -> list[dict]:
    """
    Read one host file.

    Raises:
        ConfigMalformedError: file cannot be parsed or is not a list of objects
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigMalformedError(f"invalid YAML/JSON: {e}", str(path))
    except OSError as e:
        raise ConfigMalformedError(f"cannot read file: {e}", str(path))

    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigMalformedError(
            f"top level must be a list of servers, got {type(data).__name__}", str(path)
        )
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigMalformedError(f"server #{index + 1} is not an object", str(path))
    return data


def import_ssh_config(path: Path) -> list[dict]:
    """
    Convert concrete ``Host`` blocks of an OpenSSH config into host objects.

    Wildcard and negated patterns are skipped; their options still apply
    to the concrete hosts through paramiko's lookup.
    """
    try:
        ssh_config = paramiko.SSHConfig.from_path(str(path))
    except OSError as e:
        raise ConfigMalformedError(f"cannot read ssh config: {e}", str(path))

    hosts = []
    for alias in sorted(ssh_config.get_hostnames()):
        if any(ch in alias for ch in "*?!"):
            continue
        options = ssh_config.lookup(alias)
        host = {
            "name": alias,
            "host": options.get("hostname", alias),
        }
        if "user" in options:
            host["username"] = options["user"]
        if "port" in options:
            host["port"] = options["port"]
        identity_files = options.get("identityfile")
        if identity_files:
            host["privateKey"] = identity_files[0]
        hosts.append(host)
    return hosts


def load_host_configs(
    paths: Iterable[str],
    ssh_config: Optional[str] = None,
) -> tuple[list[dict], list[str]]:
    """
    Merge every host source.

    Missing files are skipped with a message; unparsable files abort.

    Returns:
        Tuple of (merged host objects, messages for the output log)

    Raises:
        ConfigMalformedError: a source exists but cannot be used
    """
    merged: list[dict] = []
    messages: list[str] = []

    for raw_path in paths:
        path = Path(raw_path).expanduser()
        if not path.exists():
            messages.append(f"Config file '{path}' not found, skipped.")
            continue
        hosts = load_hosts_file(path)
        messages.append(f"Loaded {len(hosts)} server(s) from '{path}'.")
        merged.extend(hosts)

    if ssh_config:
        path = Path(ssh_config).expanduser()
        if path.exists():
            hosts = import_ssh_config(path)
            messages.append(f"Imported {len(hosts)} host(s) from ssh config '{path}'.")
            merged.extend(hosts)
        else:
            messages.append(f"SSH config '{path}' not found, skipped.")

    return merged, messages
