"""Search configuration: strategies, options and the resulting plan."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IterationStrategy(str, Enum):
    """How the amplification iteration count is derived from the Grover angle."""
    OPTIMAL = "optimal"
    SINGLE_ITERATION = "single"
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    HALF_OPTIMAL = "half_optimal"
    CUSTOM = "custom"


class SamplingStrategy(str, Enum):
    """How the number of matching items is estimated before searching."""
    AUTO = "auto"
    FULL_SCAN = "full_scan"
    SAMPLING = "sampling"
    ASSUME_ONE = "assume_one"
    USER_PROVIDED = "user_provided"


@dataclass(frozen=True)
class SearchOptions:
    """Options for a quantum search.

    Attributes:
        max_attempts: Upper bound on amplification runs (clamped to >= 1)
        iteration_strategy: Iteration count formula
        sampling_strategy: Match-count estimation method
        sample_size: Items drawn by SAMPLING
        full_scan_threshold: AUTO uses FULL_SCAN up to this many items
        custom_iteration_factor: Multiplier applied to the optimal count (CUSTOM)
        custom_iteration_offset: Offset added after the multiplier (CUSTOM)
        known_match_count: Caller-known match count; a positive value bypasses
                           the sampling strategy entirely
        max_targets: Cap on the number of results returned by ``search``
        resample_on_retry: Re-estimate and re-plan before every retry
        enable_logging: Emit per-call messages at INFO instead of DEBUG
    """
    max_attempts: int = 5
    iteration_strategy: IterationStrategy = IterationStrategy.OPTIMAL
    sampling_strategy: SamplingStrategy = SamplingStrategy.AUTO
    sample_size: int = 100
    full_scan_threshold: int = 1000
    custom_iteration_factor: float = 1.0
    custom_iteration_offset: int = 0
    known_match_count: Optional[int] = None
    max_targets: Optional[int] = None
    resample_on_retry: bool = False
    enable_logging: bool = False


def default_options() -> SearchOptions:
    """Return a new SearchOptions with default values."""
    return SearchOptions()


@dataclass(frozen=True)
class SearchPlan:
    """Concrete parameters for one search.

    ``iterations`` is always derived from ``estimated_matches`` and
    ``collection_size``; a plan is computed fresh for every call.
    """
    collection_size: int
    estimated_matches: int
    iterations: int
    max_attempts: int

    @property
    def no_match(self) -> bool:
        """No amplification is possible; the search has nothing to find."""
        return self.estimated_matches == 0

    @property
    def saturated(self) -> bool:
        """Every item is expected to match; amplification is skipped."""
        return self.collection_size > 0 and self.estimated_matches >= self.collection_size
