"""Match-count estimation (oracle counting).

This is the classical pre-pass that tunes the quantum iteration count. It
never touches the amplification itself.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Optional, Sequence

import numpy as np

from ..errors import InvalidConfigurationError, InvalidInputError
from ..utils import call_level, clamp, get_logger, round_half_away
from .options import SamplingStrategy, SearchOptions

if TYPE_CHECKING:
    from ..backends.base import QuantumBackend
    from ..core import Predicate

logger = get_logger(__name__)


def validate_inputs(items: Any, predicate: Any) -> None:
    """Check that items and predicate can be searched.

    Raises:
        InvalidInputError: items is not a sized, indexable collection, or
            predicate is not a callable taking exactly one argument
    """
    if items is None or not hasattr(items, "__len__") or not hasattr(items, "__getitem__"):
        raise InvalidInputError("items must be a sized, indexable collection")
    if isinstance(items, (dict, set, frozenset)):
        raise InvalidInputError("items must be a sequence, not a mapping or set")

    if not callable(predicate):
        raise InvalidInputError("predicate must be callable")

    try:
        signature = inspect.signature(predicate)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are accepted as-is.
        return
    try:
        signature.bind(object())
    except TypeError:
        raise InvalidInputError("predicate must accept exactly one argument") from None


def count_matches(
    items: Sequence[Any],
    predicate: "Predicate",
    mode: SamplingStrategy = SamplingStrategy.FULL_SCAN,
    sample_size: int = 0,
) -> int:
    """Count matching items classically.

    FULL_SCAN evaluates the predicate on every item. SAMPLING evaluates it on
    ``sample_size`` items (capped at N) drawn uniformly without replacement
    and returns the number of matches inside the sample, unscaled.

    A fresh generator is used per call so concurrent callers never share
    PRNG state.
    """
    n = len(items)
    if mode is SamplingStrategy.FULL_SCAN:
        return sum(1 for i in range(n) if predicate(items[i]))
    if mode is SamplingStrategy.SAMPLING:
        k = min(sample_size, n)
        if k <= 0:
            return 0
        rng = np.random.default_rng()
        indices = rng.choice(n, size=k, replace=False)
        return sum(1 for i in indices if predicate(items[int(i)]))
    raise InvalidConfigurationError(f"counting mode not supported: {mode}")


def scale_sample(matches_in_sample: int, n: int, sample_size: int) -> int:
    """Scale a sample match count linearly up to the full collection."""
    k = min(sample_size, n)
    if k <= 0:
        return 0
    return int(clamp(round_half_away(matches_in_sample * n / k), 0, n))


def estimate_match_count(
    items: Sequence[Any],
    predicate: "Predicate",
    options: Optional[SearchOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> int:
    """Estimate how many items satisfy the predicate.

    Args:
        items: Collection to search
        predicate: Match function defined over every item
        options: Search options (defaults if None)
        backend: Backend whose ``count_matches`` performs the counting;
                 the classical counter is used when None

    Returns:
        Estimated match count in [0, N]

    Raises:
        InvalidInputError: items/predicate have the wrong shape
        InvalidConfigurationError: USER_PROVIDED without a count, or a
            non-positive sample size for sampling
    """
    validate_inputs(items, predicate)
    opts = options or SearchOptions()
    n = len(items)

    if opts.known_match_count is not None and opts.known_match_count > 0:
        return opts.known_match_count

    strategy = opts.sampling_strategy
    if strategy is SamplingStrategy.USER_PROVIDED:
        if opts.known_match_count is None:
            raise InvalidConfigurationError("user-provided sampling requires known_match_count")
        if opts.known_match_count < 0:
            raise InvalidConfigurationError("known_match_count must be non-negative")
        return 0
    if strategy is SamplingStrategy.ASSUME_ONE:
        return 1

    if n == 0:
        return 0

    if strategy is SamplingStrategy.AUTO:
        strategy = SamplingStrategy.FULL_SCAN if n <= opts.full_scan_threshold else SamplingStrategy.SAMPLING

    counter = backend.count_matches if backend is not None else count_matches

    if strategy is SamplingStrategy.FULL_SCAN:
        estimate = counter(items, predicate, SamplingStrategy.FULL_SCAN, 0)
    else:
        if opts.sample_size <= 0:
            raise InvalidConfigurationError("sample_size must be positive for sampling")
        in_sample = counter(items, predicate, SamplingStrategy.SAMPLING, opts.sample_size)
        estimate = scale_sample(in_sample, n, opts.sample_size)

    logger.log(
        call_level(opts.enable_logging),
        "Estimated %d matches in %d items (%s)", estimate, n, strategy.value,
    )
    return estimate
