"""Simulator backend using Qiskit Aer."""

from __future__ import annotations

from typing import Any, List, Optional

import numpy as np
from qiskit import QuantumCircuit, transpile
from qiskit_aer import AerSimulator

from .circuit import CircuitBackend


class SimulatorBackend(CircuitBackend):
    """Local simulator backend using Qiskit Aer."""

    def __init__(
        self,
        noise_model=None,
        seed: Optional[int] = None,
        search_shots: int = 32,
        max_qubits: int = 16,
    ):
        """Initialize the simulator.

        Parameters
        ----------
        noise_model : NoiseModel, optional
            Noise model to simulate realistic hardware
        seed : int, optional
            Seed for reproducible runs. Each circuit run draws its own
            simulator seed from it, so repeated runs still differ.
        search_shots : int
            Shots per amplification run
        max_qubits : int
            Largest index register accepted for search
        """
        super().__init__(search_shots=search_shots, max_qubits=max_qubits)
        self._simulator = AerSimulator(noise_model=noise_model)
        self._noise_model = noise_model
        self._seed = seed
        self._seeds = np.random.default_rng(seed) if seed is not None else None

    def sample(self, circuit: QuantumCircuit, shots: int) -> List[str]:
        """Run circuit on the simulator and return per-shot bitstrings."""
        run_options = {}
        if self._seeds is not None:
            run_options["seed_simulator"] = int(self._seeds.integers(2**31))

        qc_transpiled = transpile(circuit, self._simulator)
        job = self._simulator.run(qc_transpiled, shots=shots, memory=True, **run_options)
        result = job.result()
        return result.get_memory()

    def name(self) -> str:
        return "aer_simulator" + ("_noisy" if self._noise_model else "")

    @property
    def is_simulator(self) -> bool:
        return True

    def get_info(self) -> dict[str, Any]:
        info = super().get_info()
        info["seed"] = self._seed
        info["max_qubits"] = self.max_qubits
        return info
