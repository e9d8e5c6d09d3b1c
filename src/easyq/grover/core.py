"""Amplitude amplification circuits.

This module builds Grover circuits over an index register addressing a
collection of N items. When N is not a power of two the initial state is
the uniform superposition over the N valid indices only, and the diffusion
operator reflects about that state, so the rotation angle stays
asin(sqrt(M/N)).
"""

from __future__ import annotations
import math
from typing import Dict, List, Optional

from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister
from qiskit.circuit.library import StatePreparation

from ..utils import n_index_qubits
from .oracles import Oracle, apply_mcz


class AmplificationCircuit:
    """Grover search circuit over N indices.

    Example:
        >>> from easyq.grover import AmplificationCircuit, create_marking_oracle
        >>> oracle = create_marking_oracle(3, [5])
        >>> circuit = AmplificationCircuit(8, oracle, n_iterations=2).build_circuit()
    """

    def __init__(self, n_items: int, oracle: Oracle, n_iterations: int):
        """Initialize the circuit builder.

        Args:
            n_items: Number of valid indices (N >= 1)
            oracle: Function that applies the oracle to a circuit.
                    Signature: oracle(circuit, qubit_list) -> None
            n_iterations: Number of oracle + diffusion rounds
        """
        if n_items < 1:
            raise ValueError("n_items must be at least 1")
        if n_iterations < 0:
            raise ValueError("n_iterations must be non-negative")

        self.n_items = n_items
        self.n_qubits = n_index_qubits(n_items)
        self.oracle = oracle
        self.n_iterations = n_iterations

    @property
    def is_power_of_two(self) -> bool:
        return self.n_items == 2 ** self.n_qubits

    def build_circuit(self, measure: bool = True) -> QuantumCircuit:
        """Build the complete amplification circuit.

        Args:
            measure: Whether to add measurement gates

        Returns:
            Qiskit QuantumCircuit
        """
        qr = QuantumRegister(self.n_qubits, 'q')
        circuit = QuantumCircuit(qr)

        if measure:
            cr = ClassicalRegister(self.n_qubits, 'meas')
            circuit.add_register(cr)

        qubits = list(range(self.n_qubits))

        # Step 1: Uniform superposition over the valid indices
        self._apply_preparation(circuit, qubits, inverse=False)

        # Step 2: Oracle + diffusion rounds
        for _ in range(self.n_iterations):
            self.oracle(circuit, qubits)
            self._apply_diffusion(circuit, qubits)

        # Step 3: Measure
        if measure:
            circuit.measure(qubits, qubits)

        return circuit

    def _apply_preparation(self, circuit: QuantumCircuit, qubits: List[int], inverse: bool) -> None:
        if self.is_power_of_two:
            circuit.h(qubits)
            return
        amplitude = 1.0 / math.sqrt(self.n_items)
        vector = [amplitude] * self.n_items + [0.0] * (2 ** self.n_qubits - self.n_items)
        prep = StatePreparation(vector)
        circuit.append(prep.inverse() if inverse else prep, qubits)

    def _apply_diffusion(self, circuit: QuantumCircuit, qubits: List[int]) -> None:
        """Reflect about the prepared state: A (2|0><0| - I) A^dagger."""
        self._apply_preparation(circuit, qubits, inverse=True)
        circuit.x(qubits)
        apply_mcz(circuit, qubits)
        circuit.x(qubits)
        self._apply_preparation(circuit, qubits, inverse=False)


def most_frequent_index(counts: Dict[str, int], n_items: int) -> Optional[int]:
    """Most frequently measured index below n_items, or None.

    Qiskit bitstrings are already in c[n-1]...c[0] order.
    """
    best: Optional[int] = None
    best_count = 0
    for state_str, count in counts.items():
        index = int(state_str.replace(" ", ""), 2)
        if index < n_items and count > best_count:
            best, best_count = index, count
    return best
