"""
Server catalog - host models, host file loading, project mapping.
"""

from .models import HostConfig, PortKnock, ResolvedHost, ServerEntry, DEFAULT_SSH_PORT
from .catalog import ServerCatalog, display_name
from .project_map import ProjectPathMapper, ProjectMatch, normalize_path, is_path_inside
from .loader import load_host_configs, load_hosts_file, import_ssh_config

__all__ = [
    "HostConfig",
    "PortKnock",
    "ResolvedHost",
    "ServerEntry",
    "DEFAULT_SSH_PORT",
    "ServerCatalog",
    "display_name",
    "ProjectPathMapper",
    "ProjectMatch",
    "normalize_path",
    "is_path_inside",
    "load_host_configs",
    "load_hosts_file",
    "import_ssh_config",
]
