"""
Port forwarding wizard and address validation.
"""

from .wizard import (
    ForwardingWizard,
    ForwardingResult,
    ForwardingType,
    WizardStep,
    FORWARDING_TYPES,
    RECENTLY_USED,
    validate_address,
    build_spec,
)

__all__ = [
    "ForwardingWizard",
    "ForwardingResult",
    "ForwardingType",
    "WizardStep",
    "FORWARDING_TYPES",
    "RECENTLY_USED",
    "validate_address",
    "build_spec",
]
