"""Circuit-based backend: builds Qiskit circuits for every primitive.

Subclasses only decide where circuits run, by implementing ``sample``.
"""

from __future__ import annotations

from abc import abstractmethod
from collections import Counter
from typing import TYPE_CHECKING, Any, List, Sequence

from cryptography.hazmat.primitives import hashes
from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

from ..core import AmplificationResult, AuthenticationMode, KeyDistributionOutcome
from ..crypto import e91
from ..errors import BackendError, ErrorCode
from ..grover import AmplificationCircuit, create_predicate_oracle, most_frequent_index
from ..utils import get_logger, n_index_qubits, pack_bits
from .base import QuantumBackend

if TYPE_CHECKING:
    from ..core import Predicate
    from ..crypto.keydist import KeyDistributionOptions

logger = get_logger(__name__)

RANDOM_REGISTER_BITS = 8


class CircuitBackend(QuantumBackend):
    """Backend that runs Grover, E91 and random-bit circuits."""

    def __init__(self, search_shots: int = 32, max_qubits: int = 16):
        """Initialize the circuit backend.

        Parameters
        ----------
        search_shots : int
            Shots per amplification run; the most frequent index wins
        max_qubits : int
            Largest index register accepted for search
        """
        if search_shots < 1:
            raise ValueError("search_shots must be at least 1")
        self.search_shots = search_shots
        self.max_qubits = max_qubits

    @abstractmethod
    def sample(self, circuit: QuantumCircuit, shots: int) -> List[str]:
        """Run a circuit and return one measured bitstring per shot.

        Bitstrings are in Qiskit order (c[n-1]...c[0]).
        """
        pass

    def counts(self, circuit: QuantumCircuit, shots: int) -> dict[str, int]:
        """Run a circuit and return measurement counts."""
        return dict(Counter(self.sample(circuit, shots)))

    # --- search -----------------------------------------------------------

    def run_amplification(
        self,
        items: Sequence[Any],
        predicate: "Predicate",
        iterations: int,
    ) -> AmplificationResult:
        n = len(items)
        if n == 0:
            return AmplificationResult(found=False)

        n_qubits = n_index_qubits(n)
        if n_qubits > self.max_qubits:
            raise BackendError(
                ErrorCode.INVALID_ARGUMENT,
                f"{n} items need {n_qubits} qubits, backend allows {self.max_qubits}",
            )

        oracle, marked = create_predicate_oracle(n_qubits, items, predicate)
        circuit = AmplificationCircuit(n, oracle, iterations).build_circuit(measure=True)
        logger.debug(
            "Amplification circuit: %d qubits, %d marked, %d iterations, depth %d",
            n_qubits, len(marked), iterations, circuit.depth(),
        )

        index = most_frequent_index(self.counts(circuit, self.search_shots), n)
        if index is None or not predicate(items[index]):
            return AmplificationResult(found=False)
        return AmplificationResult(found=True, item=items[index], index=index)

    # --- key distribution --------------------------------------------------

    def run_key_exchange(self, options: "KeyDistributionOptions") -> KeyDistributionOutcome:
        # Key bits: both parties measure along Z
        key_circuit = e91.bell_pair_circuit(*e91.KEY_ANGLES)
        alice, bob = e91.split_shots(self.sample(key_circuit, options.key_length))
        qber = e91.error_rate(alice, bob)

        # Bell test
        shots = e91.chsh_shots(options.security_level)
        correlators = {
            setting: e91.correlator(self.counts(circuit, shots))
            for setting, circuit in e91.chsh_circuits()
        }
        s_value = e91.chsh_value(correlators)
        pairs = options.key_length + 4 * shots

        failure = None
        if s_value < options.security_threshold:
            failure = (
                f"CHSH value {s_value:.4f} below threshold {options.security_threshold:.4f}; "
                "possible eavesdropping"
            )
        elif qber > options.max_acceptable_error_rate:
            failure = (
                f"Error rate {qber:.4f} exceeds maximum {options.max_acceptable_error_rate:.4f}"
            )
        elif not options.enable_error_correction and qber > 0:
            failure = "Key bits disagree and error correction is disabled"

        if failure is not None:
            return KeyDistributionOutcome(
                success=False,
                security_parameter=s_value,
                error_rate=qber,
                entangled_pairs_created=pairs,
                failure_reason=failure,
            )

        # With error correction Bob reconciles his bits to Alice's.
        key = pack_bits(alice)
        return KeyDistributionOutcome(
            success=True,
            key=key,
            security_parameter=s_value,
            error_rate=qber,
            entangled_pairs_created=pairs,
            authentication_tag=_authentication_tag(key, options.authentication_mode),
        )

    # --- randomness ----------------------------------------------------------

    def random_bytes(self, length: int) -> bytes:
        if length <= 0:
            return b""
        qr = QuantumRegister(RANDOM_REGISTER_BITS, 'q')
        cr = ClassicalRegister(RANDOM_REGISTER_BITS, 'meas')
        circuit = QuantumCircuit(qr, cr)
        circuit.h(range(RANDOM_REGISTER_BITS))
        circuit.measure(range(RANDOM_REGISTER_BITS), range(RANDOM_REGISTER_BITS))

        shots = self.sample(circuit, length)
        if len(shots) != length:
            raise BackendError(ErrorCode.RUNTIME, f"expected {length} shots, got {len(shots)}")
        return bytes(int(s.replace(" ", ""), 2) for s in shots)


def _authentication_tag(key: bytes, mode: AuthenticationMode) -> bytes:
    """Digest of the key used to confirm both parties hold the same key."""
    if mode is AuthenticationMode.NONE:
        return b""
    algorithm = hashes.SHA512() if mode is AuthenticationMode.ENHANCED else hashes.SHA256()
    digest = hashes.Hash(algorithm)
    digest.update(key)
    return digest.finalize()
