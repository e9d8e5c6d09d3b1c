"""Quantum search over unstructured collections.

Example:
    >>> from easyq.search import search
    >>> items = ["apple", "banana", "cherry", "date"]
    >>> results = search(items, lambda item: len(item) > 5)
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..core import SearchResult
from ..errors import NoMatchesError
from ..utils import call_level, get_logger
from .estimation import validate_inputs
from .options import SamplingStrategy, SearchOptions, SearchPlan
from .planner import plan_search

if TYPE_CHECKING:
    from ..backends.base import QuantumBackend
    from ..core import Predicate

logger = get_logger(__name__)

SEARCH_ONE_MAX_ATTEMPTS = 3


def _default_backend() -> "QuantumBackend":
    from ..backends.simulator import SimulatorBackend

    return SimulatorBackend()


def _target_count(plan: SearchPlan, options: SearchOptions) -> int:
    wanted = plan.estimated_matches
    if options.max_targets is not None:
        wanted = min(wanted, options.max_targets)
    return max(1, wanted)


def search(
    items: Sequence[Any],
    predicate: "Predicate",
    options: Optional[SearchOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> list[SearchResult]:
    """Search items for elements satisfying predicate.

    Each attempt runs amplitude amplification once with the planned
    iteration count. A miss triggers the next attempt with the same plan;
    hits are collected until the expected number of distinct matches is
    held or the attempt budget is spent.

    Args:
        items: Collection to search
        predicate: Match function defined over every item
        options: Search options (defaults if None)
        backend: Quantum backend (a local simulator if None)

    Returns:
        Matching items ordered by index

    Raises:
        InvalidInputError: items/predicate have the wrong shape
        InvalidConfigurationError: contradictory options
        NoMatchesError: nothing was found within the attempt budget
    """
    validate_inputs(items, predicate)
    opts = options or SearchOptions()

    if len(items) == 0:
        raise NoMatchesError()

    if backend is None:
        backend = _default_backend()

    plan = plan_search(items, predicate, opts, backend)
    return execute_plan(items, predicate, plan, opts, backend)


def _all_items(items: Sequence[Any], options: SearchOptions) -> list[SearchResult]:
    limit = len(items) if options.max_targets is None else min(len(items), options.max_targets)
    return [SearchResult(index=i, item=items[i]) for i in range(limit)]


def execute_plan(
    items: Sequence[Any],
    predicate: "Predicate",
    plan: SearchPlan,
    options: SearchOptions,
    backend: "QuantumBackend",
) -> list[SearchResult]:
    """Run the attempt loop for an already computed plan.

    The plan's iteration count is what reaches the backend on every
    attempt, unless ``options.resample_on_retry`` replaces the plan before
    a retry.

    Raises:
        NoMatchesError: the plan expects no matches, or nothing was found
            within the attempt budget
    """
    level = call_level(options.enable_logging)

    if plan.no_match:
        logger.log(level, "Estimated no matches; skipping amplification")
        raise NoMatchesError()

    if plan.saturated:
        logger.log(level, "Every item expected to match; returning all items")
        return _all_items(items, options)

    found: dict[int, SearchResult] = {}
    wanted = _target_count(plan, options)

    for attempt in range(1, plan.max_attempts + 1):
        if attempt > 1 and options.resample_on_retry and not found:
            plan = plan_search(items, predicate, options, backend)
            if plan.no_match:
                logger.log(level, "Re-estimate found no matches; stopping")
                break
            if plan.saturated:
                logger.log(level, "Re-estimate expects every item to match; returning all items")
                return _all_items(items, options)
            wanted = _target_count(plan, options)

        outcome = backend.run_amplification(items, predicate, plan.iterations)
        if outcome.found and outcome.index is not None:
            logger.log(level, "Attempt %d/%d hit index %d", attempt, plan.max_attempts, outcome.index)
            found.setdefault(outcome.index, SearchResult(index=outcome.index, item=outcome.item))
            if len(found) >= wanted:
                break
        else:
            logger.log(level, "Attempt %d/%d returned no match", attempt, plan.max_attempts)

    if not found:
        raise NoMatchesError()

    return [found[i] for i in sorted(found)]


def search_one(
    items: Sequence[Any],
    predicate: "Predicate",
    options: Optional[SearchOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> SearchResult:
    """Search for a single matching item.

    Assumes exactly one match exists, which skips the counting pre-pass,
    and uses a smaller attempt budget.
    """
    opts = replace(
        options or SearchOptions(),
        sampling_strategy=SamplingStrategy.ASSUME_ONE,
        max_attempts=SEARCH_ONE_MAX_ATTEMPTS,
        max_targets=1,
    )
    return search(items, predicate, opts, backend)[0]
