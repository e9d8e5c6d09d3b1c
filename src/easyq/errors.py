"""Exception hierarchy for easyq.

Configuration and input errors are raised before any backend call and are
never retried. Backend errors propagate unchanged.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import KeyDistributionOutcome


class ErrorCode(IntEnum):
    """Status codes reported by quantum backends."""
    SUCCESS = 0
    GENERAL = 1
    NOT_INITIALIZED = 2
    INVALID_ARGUMENT = 3
    RUNTIME = 4
    TIMEOUT = 5
    AUTHENTICATION = 6
    CONNECTION = 7


class EasyQError(Exception):
    """Base class for all easyq errors."""


class InvalidConfigurationError(EasyQError, ValueError):
    """Options are contradictory or a required field is missing."""


class InvalidLengthError(InvalidConfigurationError):
    def __init__(self, message: str = "invalid length (must be greater than zero)"):
        super().__init__(message)


class InvalidRangeError(InvalidConfigurationError):
    def __init__(self, message: str = "invalid range (min must be less than max)"):
        super().__init__(message)


class InvalidSecurityLevelError(InvalidConfigurationError):
    def __init__(self, message: str = "invalid security level (must be 1-5)"):
        super().__init__(message)


class InvalidAuthError(InvalidConfigurationError):
    def __init__(self, message: str = "missing authentication details for selected backend"):
        super().__init__(message)


class MissingEndpointError(InvalidConfigurationError):
    def __init__(self, message: str = "missing endpoint for local device"):
        super().__init__(message)


class MissingProviderInfoError(InvalidConfigurationError):
    def __init__(self, message: str = "missing provider information for custom backend"):
        super().__init__(message)


class UnknownBackendError(InvalidConfigurationError):
    def __init__(self, message: str = "unknown backend type"):
        super().__init__(message)


class InvalidInputError(EasyQError, TypeError):
    """The collection or predicate has the wrong shape."""


class NoMatchesError(EasyQError, LookupError):
    """Search attempts were exhausted without a hit."""

    def __init__(self, message: str = "no matching items found"):
        super().__init__(message)


class KeyGenerationFailedError(EasyQError):
    """The backend reported a failed key exchange.

    The partial outcome is kept on ``outcome`` so diagnostic callers can
    still read the security parameter and error rate.
    """

    def __init__(self, outcome: "KeyDistributionOutcome", message: str = "key generation failed"):
        reason = outcome.failure_reason
        super().__init__(f"{message}: {reason}" if reason else message)
        self.outcome = outcome


class BackendError(EasyQError, RuntimeError):
    """Error reported by a quantum backend."""

    def __init__(self, code: int | ErrorCode, message: str):
        try:
            self.code = ErrorCode(code)
        except ValueError:
            self.code = code
        self.message = message
        super().__init__(f"backend error (code {int(code)}): {message}")
