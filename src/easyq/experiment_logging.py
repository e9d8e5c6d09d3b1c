"""Experiment utilities for collecting search runs into pandas DataFrames."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Sequence

import pandas as pd

from .errors import NoMatchesError
from .search import IterationStrategy, SearchOptions, execute_plan, plan_search, success_probability

if TYPE_CHECKING:
    from .backends.base import QuantumBackend


def sweep_iteration_strategies(
    collection_size: int,
    targets: Sequence[int],
    strategies: Optional[Sequence[IterationStrategy]] = None,
    repeats: int = 1,
    options: Optional[SearchOptions] = None,
    backend: Optional["QuantumBackend"] = None,
) -> pd.DataFrame:
    """Search a synthetic collection under several strategies and record metrics.

    Parameters
    ----------
    collection_size : int
        Number of items (the items are ``range(collection_size)``).
    targets : Sequence[int]
        Items that satisfy the predicate.
    strategies : Sequence[IterationStrategy]
        Iteration strategies to compare. Defaults to every non-custom strategy.
    repeats : int
        How many times to repeat each strategy.
    options : SearchOptions
        Base options; ``iteration_strategy`` is overridden per row and
        ``resample_on_retry`` is turned off.
    backend : QuantumBackend
        Backend running the searches (a local simulator if None).
    """
    if strategies is None:
        strategies = [s for s in IterationStrategy if s is not IterationStrategy.CUSTOM]
    if backend is None:
        from .backends.simulator import SimulatorBackend
        backend = SimulatorBackend()

    items = list(range(collection_size))
    target_set = frozenset(targets)

    def predicate(x: int) -> bool:
        return x in target_set

    base = options or SearchOptions()
    records: list[dict] = []

    for strategy in strategies:
        # each row records the single plan its search ran with
        opts = replace(base, iteration_strategy=strategy, resample_on_retry=False)
        for repeat in range(repeats):
            plan = plan_search(items, predicate, opts, backend)
            try:
                results = execute_plan(items, predicate, plan, opts, backend)
                found = [r.index for r in results]
            except NoMatchesError:
                found = []

            records.append(
                {
                    "strategy": strategy.value,
                    "collection_size": collection_size,
                    "true_matches": len(target_set),
                    "estimated_matches": plan.estimated_matches,
                    "iterations": plan.iterations,
                    "max_attempts": plan.max_attempts,
                    "repeat": repeat,
                    "success": bool(found),
                    "found": found,
                    "ideal_success_probability": success_probability(
                        collection_size, len(target_set), plan.iterations
                    ),
                }
            )

    return pd.DataFrame.from_records(records)


def summarize_success(df: pd.DataFrame) -> pd.DataFrame:
    """Aggregate success rate per strategy."""

    if df.empty:
        return df

    summary = (
        df.groupby(["strategy", "iterations"], as_index=False)["success"]
        .mean()
        .rename(columns={"success": "success_rate"})
    )
    return summary
