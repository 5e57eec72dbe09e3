"""
Port forwarding wizard.

Collects a forwarding spec such as ``-L 9000:localhost:9000`` through a
fixed sequence of prompts:

    COLLECTING_TYPE -> COLLECTING_FIRST_ADDRESS -> COLLECTING_SECOND_ADDRESS -> BUILT

Cancelling any prompt ends the flow with no spec and no side effects.
Specs the user chooses to keep are offered again under "Recently used".
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..config import SettingsManager
from ..shell import UIShell

logger = logging.getLogger(__name__)

MAX_PORT = 65535
RECENTLY_USED = "Recently used"
SAVE_PROMPT = "Want to save this forwarding in recently used?"
SAVE_BUTTON = "Yes"

ADDRESS_PATTERN = re.compile(r"^(?:(?P<host>[^:\s]+):)?(?P<port>\d{1,5})$")


def validate_address(text: str, domain_required: bool = False) -> Optional[str]:
    """
    Check a ``[host:]port`` address.

    Returns:
        None when valid, otherwise the message to show under the input
    """
    match = ADDRESS_PATTERN.match(text or "")
    valid = (
        match is not None
        and int(match.group("port")) <= MAX_PORT
        and (match.group("host") is not None or not domain_required)
    )
    if valid:
        return None
    if domain_required:
        return "Please enter a domain and port in range 0 - 65535 (e. g. localhost:9000)"
    return ("Please enter a domain (optional)  and port in range 0 - 65535 "
            "(e. g. localhost:9000 or 9000)")


def build_spec(option: str, first: str, second: Optional[str] = None) -> str:
    """``<option> <first>[:<second>]``"""
    spec = f"{option} {first}"
    if second is not None:
        spec += f":{second}"
    return spec


@dataclass(frozen=True)
class ForwardingType:
    label: str
    option: str
    first_prompt: str
    first_domain_required: bool
    second_prompt: Optional[str] = None
    second_domain_required: bool = True

    @property
    def has_second_address(self) -> bool:
        return self.second_prompt is not None


FORWARDING_TYPES = (
    ForwardingType(
        label="Local to remote",
        option="-L",
        first_prompt="Type local address/port (e. g. localhost:9000 or 9000)",
        first_domain_required=False,
        second_prompt="Type remote address (e. g. localhost:9000)",
    ),
    ForwardingType(
        label="Remote to local",
        option="-R",
        first_prompt="Type remote address/port (e. g. localhost:9000 or 9000)",
        first_domain_required=False,
        second_prompt="Type local address (e. g. localhost:9000)",
    ),
    ForwardingType(
        label="SOCKS",
        option="-D",
        first_prompt="Type address for SOCKS (e. g. localhost:9000)",
        first_domain_required=True,
    ),
)


class WizardStep(Enum):
    COLLECTING_TYPE = auto()
    COLLECTING_FIRST_ADDRESS = auto()
    COLLECTING_SECOND_ADDRESS = auto()
    SELECTING_RECENT = auto()
    BUILT = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class ForwardingResult:
    spec: str
    from_recent: bool = False


class ForwardingWizard:
    """
    One wizard run per command invocation.

    Usage:
        wizard = ForwardingWizard(shell, settings_manager)
        result = wizard.run()
        if result:
            orchestrator.connect(name, forwarding=result.spec)
            if not result.from_recent:
                wizard.offer_to_remember(result.spec)
    """

    def __init__(self, shell: UIShell, settings: SettingsManager):
        self.shell = shell
        self.settings_manager = settings
        self.step = WizardStep.COLLECTING_TYPE

    @property
    def recent(self) -> list[str]:
        return self.settings_manager.settings.recently_used_forwardings

    def type_labels(self) -> list[str]:
        labels = [t.label for t in FORWARDING_TYPES]
        if self.recent:
            labels.append(RECENTLY_USED)
        return labels

    def run(self) -> Optional[ForwardingResult]:
        """Walk the prompts; None if the user cancelled at any step."""
        self.step = WizardStep.COLLECTING_TYPE
        label = self.shell.pick(self.type_labels(), "Select forwarding type...")
        if label is None:
            return self._cancel()

        if label == RECENTLY_USED:
            self.step = WizardStep.SELECTING_RECENT
            spec = self.shell.pick(list(self.recent), "Select forwarding arguments from recently used...")
            if spec is None:
                return self._cancel()
            self.step = WizardStep.BUILT
            return ForwardingResult(spec, from_recent=True)

        ftype = next((t for t in FORWARDING_TYPES if t.label == label), None)
        if ftype is None:
            logger.warning(f"Unknown forwarding type {label!r}")
            return self._cancel()

        self.step = WizardStep.COLLECTING_FIRST_ADDRESS
        first = self._ask_address(ftype.first_prompt, ftype.first_domain_required)
        if not first:
            return self._cancel()

        second = None
        if ftype.has_second_address:
            self.step = WizardStep.COLLECTING_SECOND_ADDRESS
            second = self._ask_address(ftype.second_prompt, ftype.second_domain_required)
            if not second:
                return self._cancel()

        self.step = WizardStep.BUILT
        return ForwardingResult(build_spec(ftype.option, first, second))

    def offer_to_remember(self, spec: str) -> bool:
        """
        Ask whether to keep ``spec`` in the recently used list.

        Returns:
            True if the spec was added and saved
        """
        if spec in self.recent:
            return False
        if self.shell.show_info(SAVE_PROMPT, SAVE_BUTTON) != SAVE_BUTTON:
            return False
        self.settings_manager.settings.add_recent_forwarding(spec)
        self.settings_manager.save()
        logger.info(f"Saved forwarding '{spec}' to recently used")
        return True

    def _ask_address(self, prompt: str, domain_required: bool) -> Optional[str]:
        return self.shell.prompt(
            prompt,
            validate=lambda text: validate_address(text, domain_required),
            ignore_focus_out=True,
        )

    def _cancel(self) -> None:
        self.step = WizardStep.CANCELLED
        return None
