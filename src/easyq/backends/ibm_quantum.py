"""IBM Quantum hardware backend.

Runs the same amplification, E91 and random-bit circuits as the local
simulator, sampled through the Qiskit Runtime ``SamplerV2`` primitive.
"""

from __future__ import annotations

from typing import Any, List, Optional

from qiskit import QuantumCircuit, transpile

from ..errors import BackendError, ErrorCode
from ..utils import get_logger
from .circuit import CircuitBackend

try:
    from qiskit_ibm_runtime import QiskitRuntimeService, SamplerV2
    IBM_AVAILABLE = True
except ImportError:
    IBM_AVAILABLE = False

logger = get_logger(__name__)

CHANNEL = "ibm_quantum_platform"


def _connect(token: Optional[str], instance: Optional[str]) -> "QiskitRuntimeService":
    """Open a runtime service from explicit credentials or the saved account."""
    if token:
        return QiskitRuntimeService(channel=CHANNEL, token=token, instance=instance)
    if instance:
        return QiskitRuntimeService(instance=instance)
    return QiskitRuntimeService()


class IBMQuantumBackend(CircuitBackend):
    """Circuit backend sampling on IBM quantum processors."""

    def __init__(
        self,
        backend_name: Optional[str] = None,
        token: Optional[str] = None,
        instance: Optional[str] = None,
        optimization_level: int = 3,
        search_shots: int = 64,
        max_qubits: int = 8,
    ):
        """Connect to IBM Quantum and select a device.

        Parameters
        ----------
        backend_name : str, optional
            Device name (e.g. "ibm_brisbane"). The least busy operational
            device is used when omitted.
        token : str, optional
            API key. The saved account is used when omitted.
        instance : str, optional
            Instance CRN or name to bill jobs to.
        optimization_level : int
            Transpiler optimization level (0-3)
        search_shots : int
            Shots per amplification run
        max_qubits : int
            Largest index register accepted for search. Multi-controlled Z
            gates on wider registers decohere before measurement.
        """
        if not IBM_AVAILABLE:
            raise ImportError(
                "qiskit-ibm-runtime is required. Install with:\n"
                "  pip install 'easyq[ibm]'"
            )
        super().__init__(search_shots=search_shots, max_qubits=max_qubits)

        try:
            self._service = _connect(token, instance)
            if backend_name:
                self._device = self._service.backend(backend_name)
            else:
                self._device = self._service.least_busy(operational=True, simulator=False)
        except Exception as e:
            raise BackendError(ErrorCode.CONNECTION, f"cannot reach IBM Quantum: {e}") from e

        self._optimization_level = optimization_level
        logger.info("Using IBM Quantum device %s (%d qubits)", self._device.name, self._device.num_qubits)

    def sample(self, circuit: QuantumCircuit, shots: int) -> List[str]:
        """Transpile for the device, sample and return per-shot bitstrings."""
        isa_circuit = transpile(
            circuit,
            self._device,
            optimization_level=self._optimization_level,
        )
        logger.debug(
            "%s: depth %d -> %d after transpilation, %d shots",
            self._device.name, circuit.depth(), isa_circuit.depth(), shots,
        )

        job = SamplerV2(mode=self._device).run([isa_circuit], shots=shots)
        logger.info("Submitted job %s to %s", job.job_id(), self._device.name)

        try:
            pub_result = job.result()[0]
        except Exception as e:
            raise BackendError(ErrorCode.RUNTIME, f"job {job.job_id()} failed: {e}") from e

        return pub_result.data.meas.get_bitstrings()

    def name(self) -> str:
        return f"ibm_quantum_{self._device.name}"

    @property
    def is_simulator(self) -> bool:
        return False

    def get_info(self) -> dict[str, Any]:
        info = super().get_info()
        info.update(
            device=self._device.name,
            num_qubits=self._device.num_qubits,
            max_qubits=self.max_qubits,
            status=self._device.status().status_msg,
        )
        return info
