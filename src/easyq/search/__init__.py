"""Quantum search using Grover's algorithm.

The planner decides how many amplification iterations to run:

1. Estimate the match count M (full scan, sampling, assume one, or a
   caller-supplied count)
2. Derive the Grover angle theta = asin(sqrt(M/N))
3. Pick the iteration count from the configured strategy
4. Retry up to ``max_attempts`` times with the same plan

Example usage:
    >>> from easyq.search import SearchOptions, IterationStrategy, search_one
    >>> opts = SearchOptions(iteration_strategy=IterationStrategy.CONSERVATIVE)
    >>> result = search_one(list(range(16)), lambda x: x == 11, opts)
"""

__all__ = [
    # Configuration
    "IterationStrategy",
    "SamplingStrategy",
    "SearchOptions",
    "SearchPlan",
    "default_options",
    # Planning
    "compute_iterations",
    "optimal_iterations",
    "max_safe_iterations",
    "success_probability",
    "make_plan",
    "plan_search",
    # Estimation
    "count_matches",
    "estimate_match_count",
    "validate_inputs",
    # Search
    "search",
    "search_one",
    "execute_plan",
]

from .options import IterationStrategy, SamplingStrategy, SearchOptions, SearchPlan, default_options
from .planner import (
    compute_iterations,
    make_plan,
    max_safe_iterations,
    optimal_iterations,
    plan_search,
    success_probability,
)
from .estimation import count_matches, estimate_match_count, validate_inputs
from .runner import execute_plan, search, search_one
