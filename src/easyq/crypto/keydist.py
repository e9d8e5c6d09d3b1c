"""Quantum key distribution (E91).

Keys are produced by the backend's entanglement-based key exchange. This
module validates options, bounds the retries and interprets the outcome.
Key bytes are never logged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

from ..core import AuthenticationMode, ChannelReport, KeyDistributionOutcome
from ..errors import (
    InvalidConfigurationError,
    InvalidLengthError,
    InvalidSecurityLevelError,
    KeyGenerationFailedError,
)
from ..utils import call_level, get_logger
from .security import CLASSICAL_LIMIT, QUANTUM_MAX, evaluate_channel, security_margin

if TYPE_CHECKING:
    from ..backends.base import QuantumBackend

logger = get_logger(__name__)

PROBE_KEY_LENGTH = 32
PROBE_MAX_ATTEMPTS = 2
UNKNOWN_FAILURE = "Unknown failure"


@dataclass(frozen=True)
class KeyDistributionOptions:
    """Options for quantum key distribution.

    Attributes:
        key_length: Key length in bits (> 0)
        security_level: 1 (fast) to 5 (most Bell-test samples)
        security_threshold: Minimum CHSH value accepted, in (2.0, 2*sqrt(2))
        max_attempts: Key exchanges tried before giving up (>= 1)
        enable_error_correction: Reconcile Bob's bits against Alice's
        max_acceptable_error_rate: Highest tolerated error rate, in [0, 1]
        authentication_mode: Classical channel authentication
        enable_logging: Emit per-call messages at INFO instead of DEBUG
    """
    key_length: int = 256
    security_level: int = 3
    security_threshold: float = 2.2
    max_attempts: int = 5
    enable_error_correction: bool = True
    max_acceptable_error_rate: float = 0.12
    authentication_mode: AuthenticationMode = AuthenticationMode.STANDARD
    enable_logging: bool = False


def default_key_distribution_options() -> KeyDistributionOptions:
    """Return a new KeyDistributionOptions with default values."""
    return KeyDistributionOptions()


def validate_key_options(options: KeyDistributionOptions) -> None:
    """Check key distribution options.

    Raises:
        InvalidLengthError: key_length <= 0
        InvalidSecurityLevelError: security_level outside 1..5
        InvalidConfigurationError: threshold, error rate or attempts out of range
    """
    if options.key_length <= 0:
        raise InvalidLengthError()
    if not 1 <= options.security_level <= 5:
        raise InvalidSecurityLevelError()
    if not CLASSICAL_LIMIT < options.security_threshold < QUANTUM_MAX:
        raise InvalidConfigurationError(
            f"security_threshold must be in ({CLASSICAL_LIMIT}, {QUANTUM_MAX:.4f}), "
            f"got {options.security_threshold}"
        )
    if not 0.0 <= options.max_acceptable_error_rate <= 1.0:
        raise InvalidConfigurationError(
            f"max_acceptable_error_rate must be in [0, 1], got {options.max_acceptable_error_rate}"
        )
    if options.max_attempts < 1:
        raise InvalidConfigurationError("max_attempts must be at least 1")


def _default_backend() -> "QuantumBackend":
    from ..backends.simulator import SimulatorBackend

    return SimulatorBackend()


def _exchange(
    backend: "QuantumBackend",
    options: KeyDistributionOptions,
    attempt: int,
    level: int,
) -> KeyDistributionOutcome:
    """Run one key exchange and log its readings (never the key)."""
    outcome = backend.run_key_exchange(options)
    logger.log(
        level,
        "Key exchange attempt %d/%d: success=%s S=%.4f (margin %.1f%%) error_rate=%.4f pairs=%d",
        attempt, options.max_attempts, outcome.success, outcome.security_parameter,
        security_margin(outcome.security_parameter), outcome.error_rate,
        outcome.entangled_pairs_created,
    )
    return outcome


def generate_key(
    options: Optional[KeyDistributionOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> KeyDistributionOutcome:
    """Generate a shared key with the E91 protocol.

    Every attempt is one blocking key exchange with identical options.
    The first successful outcome is returned verbatim.

    Args:
        options: Key distribution options (defaults if None)
        backend: Quantum backend (a local simulator if None)

    Returns:
        Successful KeyDistributionOutcome

    Raises:
        InvalidConfigurationError: invalid options, before any backend call
        KeyGenerationFailedError: every attempt failed; ``.outcome`` holds the
            last partial outcome with its diagnostics
        BackendError: propagated unchanged from the backend
    """
    opts = options or KeyDistributionOptions()
    validate_key_options(opts)
    level = call_level(opts.enable_logging)

    if backend is None:
        backend = _default_backend()

    outcome = _exchange(backend, opts, 1, level)
    for attempt in range(2, opts.max_attempts + 1):
        if outcome.success:
            break
        outcome = _exchange(backend, opts, attempt, level)

    if outcome.success:
        return outcome

    failed = replace(
        outcome,
        key=b"",
        authentication_tag=b"",
        failure_reason=outcome.failure_reason or UNKNOWN_FAILURE,
    )
    logger.warning("Key generation failed after %d attempts: %s", opts.max_attempts, failed.failure_reason)
    raise KeyGenerationFailedError(failed)


def verify_channel_security(
    options: Optional[KeyDistributionOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> ChannelReport:
    """Check whether a quantum channel is secure without generating a full key.

    Runs a short probe exchange and evaluates its security parameter and
    error rate. A failed probe still yields its diagnostics; any other error
    propagates.

    Returns:
        ChannelReport(is_secure, security_parameter, error_rate)
    """
    opts = replace(
        options or KeyDistributionOptions(),
        key_length=PROBE_KEY_LENGTH,
        max_attempts=PROBE_MAX_ATTEMPTS,
    )

    try:
        outcome = generate_key(opts, backend)
    except KeyGenerationFailedError as e:
        outcome = e.outcome

    is_secure = evaluate_channel(outcome, opts.security_threshold, opts.max_acceptable_error_rate)
    return ChannelReport(
        is_secure=is_secure,
        security_parameter=outcome.security_parameter,
        error_rate=outcome.error_rate,
    )
