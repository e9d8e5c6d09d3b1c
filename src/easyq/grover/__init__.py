"""Grover circuit construction used by circuit-based backends.

Example usage:
    >>> from easyq.grover import AmplificationCircuit, create_predicate_oracle
    >>> items = ["apple", "banana", "cherry"]
    >>> oracle, marked = create_predicate_oracle(2, items, lambda s: s.startswith("b"))
    >>> circuit = AmplificationCircuit(len(items), oracle, n_iterations=1).build_circuit()
"""

__all__ = [
    "AmplificationCircuit",
    "most_frequent_index",
    "create_marking_oracle",
    "create_predicate_oracle",
    "apply_mcz",
]

from .core import AmplificationCircuit, most_frequent_index
from .oracles import apply_mcz, create_marking_oracle, create_predicate_oracle
