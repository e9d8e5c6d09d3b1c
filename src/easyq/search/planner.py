"""Grover iteration planning.

Turns a collection size and an estimated match count into the number of
amplitude amplification iterations to run and a bounded retry budget.

With M matches among N items the Grover rotation angle is
theta = asin(sqrt(M/N)); after k iterations the success probability is
sin^2((2k + 1) * theta), which peaks near k = pi/(4*theta) - 1/2.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..utils import call_level, get_logger, grover_angle, round_half_away
from .estimation import estimate_match_count
from .options import IterationStrategy, SearchOptions, SearchPlan

if TYPE_CHECKING:
    from ..backends.base import QuantumBackend
    from ..core import Predicate

logger = get_logger(__name__)

# Multiple of the single-match optimum a plan may never exceed.
SAFETY_FACTOR = 2


def optimal_iterations(n: int, n_solutions: int = 1) -> int:
    """Optimal number of Grover iterations for M solutions among N items.

    Returns 0 when there is nothing to amplify (M == 0) or when every item
    is a solution (M >= N).
    """
    if n_solutions <= 0 or n_solutions >= n:
        return 0
    angle = grover_angle(n, n_solutions)
    return max(0, round_half_away(math.pi / (4 * angle) - 0.5))


def max_safe_iterations(n: int) -> int:
    """Ceiling on iterations for a collection of n items.

    A plan above this can only come from a miscounted estimate or an
    extreme custom factor.
    """
    if n <= 0:
        return 0
    return SAFETY_FACTOR * max(1, math.ceil(math.pi / 4 * math.sqrt(n)))


def compute_iterations(
    n: int,
    estimated_matches: int,
    strategy: IterationStrategy = IterationStrategy.OPTIMAL,
    factor: float = 1.0,
    offset: int = 0,
) -> int:
    """Compute the iteration count for a strategy.

    Args:
        n: Collection size
        estimated_matches: Estimated number of matching items
        strategy: Iteration strategy
        factor: Multiplier on the optimal count (CUSTOM only)
        offset: Added after the multiplier (CUSTOM only)

    Returns:
        Non-negative iteration count. 0 when estimated_matches is 0 (no
        amplification possible) or >= n (already saturated).
    """
    if estimated_matches <= 0 or estimated_matches >= n:
        return 0

    angle = grover_angle(n, estimated_matches)
    quarter = math.pi / (4 * angle)

    if strategy is IterationStrategy.OPTIMAL:
        return max(0, round_half_away(quarter - 0.5))
    if strategy is IterationStrategy.SINGLE_ITERATION:
        return 1
    if strategy is IterationStrategy.AGGRESSIVE:
        return max(0, round_half_away(quarter))
    if strategy is IterationStrategy.CONSERVATIVE:
        return max(0, round_half_away(quarter - 1))
    if strategy is IterationStrategy.HALF_OPTIMAL:
        return max(0, round_half_away(math.pi / (8 * angle)))
    if strategy is IterationStrategy.CUSTOM:
        optimal = max(0, round_half_away(quarter - 0.5))
        return max(0, round_half_away(optimal * factor + offset))
    raise ValueError(f"Unknown iteration strategy: {strategy}")


def success_probability(n: int, n_solutions: int, iterations: int) -> float:
    """Ideal probability of measuring a solution after ``iterations`` rounds."""
    if n <= 0 or n_solutions <= 0:
        return 0.0
    if n_solutions >= n:
        return 1.0
    angle = grover_angle(n, n_solutions)
    return math.sin((2 * iterations + 1) * angle) ** 2


def make_plan(n: int, estimated_matches: int, options: Optional[SearchOptions] = None) -> SearchPlan:
    """Build a plan from an already known estimate."""
    opts = options or SearchOptions()
    iterations = compute_iterations(
        n,
        estimated_matches,
        opts.iteration_strategy,
        opts.custom_iteration_factor,
        opts.custom_iteration_offset,
    )
    ceiling = max_safe_iterations(n)
    if iterations > ceiling:
        logger.warning(
            "Capping %d iterations at %d for %d items (estimate %d)",
            iterations, ceiling, n, estimated_matches,
        )
        iterations = ceiling

    return SearchPlan(
        collection_size=n,
        estimated_matches=estimated_matches,
        iterations=iterations,
        max_attempts=max(1, opts.max_attempts),
    )


def plan_search(
    items: Sequence[Any],
    predicate: "Predicate",
    options: Optional[SearchOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> SearchPlan:
    """Estimate the match count and derive a SearchPlan.

    Args:
        items: Collection to search
        predicate: Match function defined over every item
        options: Search options (defaults if None)
        backend: Backend used for match counting (classical if None)

    Returns:
        SearchPlan with iterations capped at ``max_safe_iterations``
    """
    opts = options or SearchOptions()
    estimate = estimate_match_count(items, predicate, opts, backend)
    plan = make_plan(len(items), estimate, opts)
    logger.log(
        call_level(opts.enable_logging),
        "Planned search: N=%d, estimate=%d, strategy=%s, iterations=%d, attempts=%d",
        plan.collection_size, plan.estimated_matches, opts.iteration_strategy.value,
        plan.iterations, plan.max_attempts,
    )
    return plan
