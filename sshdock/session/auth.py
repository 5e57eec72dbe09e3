"""
Authentication strategy for the ssh command line.

Precedence is fixed: agent, then private key, then password. An agent
flag wins even when a key is configured too. Passwords never go on the
command line; the orchestrator types them into the session instead.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..hosts.models import ResolvedHost, DEFAULT_SSH_PORT


class AuthMethod(Enum):
    AGENT = "agent"
    PRIVATE_KEY = "private_key"
    PASSWORD = "password"


@dataclass(frozen=True)
class AuthPlan:
    """Chosen strategy plus the flags it contributes to the ssh command."""
    method: AuthMethod
    key_path: Optional[str] = None
    password: Optional[str] = None
    flags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def injects_password(self) -> bool:
        return self.method == AuthMethod.PASSWORD and self.password is not None


def port_flags(port: Optional[int]) -> tuple[str, ...]:
    """``-p <port>`` only for a set, non-default port."""
    if port and port != DEFAULT_SSH_PORT:
        return (f"-p {port}",)
    return ()


class AuthResolver:
    """Stateless; one instance is shared by the orchestrator."""

    def resolve(self, config: ResolvedHost) -> AuthPlan:
        flags = list(port_flags(config.port))

        if config.agent:
            return AuthPlan(AuthMethod.AGENT, flags=tuple(flags))

        if config.private_key:
            flags.append(f'-i "{config.private_key}"')
            return AuthPlan(
                AuthMethod.PRIVATE_KEY,
                key_path=config.private_key,
                flags=tuple(flags),
            )

        return AuthPlan(AuthMethod.PASSWORD, password=config.password, flags=tuple(flags))
