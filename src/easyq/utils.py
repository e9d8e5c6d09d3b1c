"""Shared numeric, bit-handling and logging helpers."""

from __future__ import annotations

import logging
import math
from typing import Iterable

import numpy as np


def round_half_away(x: float) -> int:
    """Round to the nearest integer, ties away from zero.

    Python's built-in ``round`` uses banker's rounding, which would turn
    e.g. 2.5 into 2. Iteration formulas expect 3.
    """
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def grover_angle(n: int, n_solutions: int) -> float:
    """Rotation angle theta with sin(theta) = sqrt(M/N).

    Args:
        n: Search space size (N > 0)
        n_solutions: Number of marked items (0 < M <= N)

    Returns:
        Angle in radians
    """
    return math.asin(math.sqrt(n_solutions / n))


def n_index_qubits(n: int) -> int:
    """Number of qubits needed to address n items (at least 1)."""
    return max(1, (n - 1).bit_length())


def pack_bits(bits: Iterable[int]) -> bytes:
    """Pack a sequence of 0/1 values into bytes, MSB first, zero padded."""
    arr = np.fromiter((int(b) for b in bits), dtype=np.uint8)
    if arr.size == 0:
        return b""
    return np.packbits(arr).tobytes()


def get_logger(name: str) -> logging.Logger:
    """Get the module logger for ``name``.

    The package attaches a ``NullHandler`` to the ``easyq`` logger, so
    nothing is emitted unless the application configures logging.
    """
    return logging.getLogger(name)


def call_level(enable_logging: bool) -> int:
    """Log level for per-call messages, raised to INFO when requested."""
    return logging.INFO if enable_logging else logging.DEBUG
