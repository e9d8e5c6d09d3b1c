"""E91 circuits and statistics.

Alice and Bob share |Phi+> = (|00> + |11>)/sqrt(2). Measuring qubit q along
the direction at angle theta in the x-z plane is ry(-theta) followed by a Z
measurement, which gives the correlator E(a, b) = cos(a - b).

With a0 = 0, a1 = pi/2, b0 = pi/4, b1 = -pi/4 the CHSH combination
S = E(a0,b0) + E(a0,b1) + E(a1,b0) - E(a1,b1) reaches 2*sqrt(2).
"""

from __future__ import annotations

from math import pi
from typing import Dict, Iterable, List, Tuple

from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

# Key bases: both parties measure along Z
KEY_ANGLES = (0.0, 0.0)

# CHSH-maximising measurement settings
ALICE_ANGLES = (0.0, pi / 2)
BOB_ANGLES = (pi / 4, -pi / 4)

# Bell-test shots per CHSH setting at security level 1; doubled per level
BASE_CHSH_SHOTS = 256


def chsh_shots(security_level: int) -> int:
    """Shots per CHSH setting for a security level (1..5)."""
    return BASE_CHSH_SHOTS * 2 ** (security_level - 1)


def bell_pair_circuit(theta_a: float, theta_b: float) -> QuantumCircuit:
    """Build a Bell pair measured along theta_a (Alice) and theta_b (Bob).

    Alice's bit is measured into c[0] and Bob's into c[1], so Qiskit
    bitstrings read "<bob><alice>".
    """
    qr = QuantumRegister(2, 'q')
    cr = ClassicalRegister(2, 'meas')
    qc = QuantumCircuit(qr, cr)

    qc.h(0)
    qc.cx(0, 1)
    if theta_a:
        qc.ry(-theta_a, 0)
    if theta_b:
        qc.ry(-theta_b, 1)
    qc.measure(0, 0)
    qc.measure(1, 1)
    return qc


def chsh_circuits() -> List[Tuple[Tuple[int, int], QuantumCircuit]]:
    """Circuits for the four CHSH settings, keyed by (alice_index, bob_index)."""
    return [
        ((i, j), bell_pair_circuit(a, b))
        for i, a in enumerate(ALICE_ANGLES)
        for j, b in enumerate(BOB_ANGLES)
    ]


def split_shots(shots: Iterable[str]) -> Tuple[List[int], List[int]]:
    """Split per-shot bitstrings into Alice's and Bob's bit lists."""
    alice: List[int] = []
    bob: List[int] = []
    for shot in shots:
        bits = shot.replace(" ", "")
        if len(bits) != 2:
            continue
        bob.append(int(bits[0]))
        alice.append(int(bits[1]))
    return alice, bob


def correlator(counts: Dict[str, int]) -> float:
    """Correlator E = <A*B> with outcomes mapped 0 -> +1, 1 -> -1."""
    total = 0
    acc = 0
    for key, n in counts.items():
        bits = key.replace(" ", "")
        if len(bits) != 2:
            continue
        sign = 1 if bits[0] == bits[1] else -1
        acc += sign * n
        total += n
    return acc / total if total else 0.0


def chsh_value(correlators: Dict[Tuple[int, int], float]) -> float:
    """Combine the four correlators into S."""
    return (
        correlators[(0, 0)]
        + correlators[(0, 1)]
        + correlators[(1, 0)]
        - correlators[(1, 1)]
    )


def error_rate(alice: List[int], bob: List[int]) -> float:
    """Fraction of positions where Alice's and Bob's key bits disagree."""
    if not alice:
        return 0.0
    mismatches = sum(1 for a, b in zip(alice, bob) if a != b)
    return mismatches / len(alice)
