"""Quantum key distribution and channel security.

Keys come from the E91 protocol: entangled pairs are measured by both
parties, a CHSH Bell test checks for eavesdropping, and the observed error
rate checks for channel noise.

Example usage:
    >>> from easyq.crypto import generate_key, verify_channel_security, security_margin
    >>> outcome = generate_key()
    >>> is_secure, s_value, qber = verify_channel_security()
    >>> security_margin(s_value)
"""

__all__ = [
    # Options
    "KeyDistributionOptions",
    "default_key_distribution_options",
    "validate_key_options",
    # Key distribution
    "generate_key",
    "verify_channel_security",
    # Security evaluation
    "security_margin",
    "evaluate_channel",
    "CLASSICAL_LIMIT",
    "QUANTUM_MAX",
]

from .keydist import (
    KeyDistributionOptions,
    default_key_distribution_options,
    generate_key,
    validate_key_options,
    verify_channel_security,
)
from .security import CLASSICAL_LIMIT, QUANTUM_MAX, evaluate_channel, security_margin
