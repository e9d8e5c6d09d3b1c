"""Oracle construction for amplitude amplification.

Oracles mark the target indices by flipping their phase.
"""

from __future__ import annotations
from typing import Any, Callable, List, Sequence

from qiskit import QuantumCircuit
from qiskit.circuit.library import ZGate

Oracle = Callable[[QuantumCircuit, List[int]], None]


def create_marking_oracle(n_qubits: int, marked_states: Sequence[int]) -> Oracle:
    """Create a phase oracle that marks specified basis states.

    Args:
        n_qubits: Number of index qubits
        marked_states: Integers of the states to mark
                      (e.g., [5] marks |101> in a 3-qubit register)

    Returns:
        Oracle function with signature (circuit, qubits) -> None
    """
    states = list(marked_states)

    def oracle(circuit: QuantumCircuit, qubits: List[int]) -> None:
        for state in states:
            _mark_state(circuit, qubits, state, n_qubits)

    return oracle


def create_predicate_oracle(
    n_qubits: int,
    items: Sequence[Any],
    predicate: Callable[[Any], bool],
) -> tuple[Oracle, List[int]]:
    """Create an oracle marking the indices whose item satisfies predicate.

    The predicate is evaluated classically once per item to find the
    indices to mark. Padding indices beyond ``len(items)`` are never marked.

    Returns:
        (oracle, marked_indices)
    """
    marked = [i for i in range(len(items)) if predicate(items[i])]
    return create_marking_oracle(n_qubits, marked), marked


def _mark_state(circuit: QuantumCircuit, qubits: List[int], state: int, n_qubits: int) -> None:
    """Mark a single state with phase -1.

    X gates map the target onto |11...1>, a multi-controlled Z flips its
    phase, and the X gates are undone.
    """
    binary = format(state, f'0{n_qubits}b')
    flips = [qubits[i] for i, bit in enumerate(reversed(binary)) if bit == '0']

    if flips:
        circuit.x(flips)
    apply_mcz(circuit, qubits)
    if flips:
        circuit.x(flips)


def apply_mcz(circuit: QuantumCircuit, qubits: List[int]) -> None:
    """Apply a multi-controlled Z (phase flip on |11...1>)."""
    n = len(qubits)

    if n == 1:
        circuit.z(qubits[0])
    elif n == 2:
        circuit.cz(qubits[0], qubits[1])
    elif n == 3:
        # CCZ = H-Toffoli-H
        circuit.h(qubits[2])
        circuit.ccx(qubits[0], qubits[1], qubits[2])
        circuit.h(qubits[2])
    else:
        mcz = ZGate().control(n - 1)
        circuit.append(mcz, qubits)
