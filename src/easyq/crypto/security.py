"""Channel security evaluation.

The CHSH value S of a Bell test is bounded by 2 for any classical (or
fully eavesdropped) channel and by 2*sqrt(2) under ideal entanglement.
How far S sits above the classical limit is the trust signal.
"""

from __future__ import annotations

import math

from ..core import KeyDistributionOutcome
from ..utils import clamp

CLASSICAL_LIMIT = 2.0
QUANTUM_MAX = 2.0 * math.sqrt(2.0)  # Tsirelson bound, ~2.83
MAX_MARGIN = QUANTUM_MAX - CLASSICAL_LIMIT


def security_margin(security_parameter: float) -> float:
    """Security margin as a percentage in [0, 100].

    0 means no quantum advantage was observed, 100 means the parameter is
    at (or, through measurement noise, above) the quantum maximum.

    Example:
        >>> round(security_margin(2.5), 1)
        60.4
    """
    margin = security_parameter - CLASSICAL_LIMIT
    if margin <= 0:
        return 0.0
    if margin >= MAX_MARGIN:
        return 100.0
    return clamp(100.0 * margin / MAX_MARGIN, 0.0, 100.0)


def evaluate_channel(outcome: KeyDistributionOutcome, threshold: float, max_error_rate: float) -> bool:
    """Decide whether a key exchange outcome can be trusted.

    The three conditions test independent failure modes (generation
    failure, eavesdropping, channel noise); none compensates for another.
    """
    return (
        outcome.success
        and outcome.security_parameter >= threshold
        and outcome.error_rate <= max_error_rate
    )
