"""Core value types shared by the search, crypto and backend layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, TypeVar

T = TypeVar("T")

# A predicate must be defined over every item of the collection it searches.
Predicate = Callable[[T], bool]


class AuthenticationMode(str, Enum):
    """How the classical channel of a key exchange is authenticated."""
    NONE = "none"
    STANDARD = "standard"
    ENHANCED = "enhanced"


@dataclass(frozen=True)
class SearchResult:
    """A matching item and its position in the searched collection."""
    index: int
    item: Any


@dataclass(frozen=True)
class AmplificationResult:
    """Raw outcome of one amplitude amplification run."""
    found: bool
    item: Any = None
    index: Optional[int] = None


@dataclass(frozen=True)
class KeyDistributionOutcome:
    """Outcome of a single key-exchange invocation.

    ``key`` is only meaningful when ``success`` is True and is kept out of
    ``repr`` so it never ends up in logs or tracebacks.
    """
    success: bool
    key: bytes = field(default=b"", repr=False)
    security_parameter: float = 0.0
    error_rate: float = 0.0
    entangled_pairs_created: int = 0
    failure_reason: Optional[str] = None
    authentication_tag: bytes = field(default=b"", repr=False)


class ChannelReport(NamedTuple):
    """Result of a channel security probe."""
    is_secure: bool
    security_parameter: float
    error_rate: float
