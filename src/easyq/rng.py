"""Random numbers from quantum measurement.

Bytes come straight from the backend; integers in a range are drawn by
rejection sampling over the smallest bit width covering the range, which
keeps the distribution uniform.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .errors import BackendError, ErrorCode, InvalidLengthError, InvalidRangeError

if TYPE_CHECKING:
    from .backends.base import QuantumBackend

# Upper bound on rejection rounds; each round accepts with probability > 1/2.
MAX_REJECTION_ROUNDS = 64


def _default_backend() -> "QuantumBackend":
    from .backends.simulator import SimulatorBackend

    return SimulatorBackend()


def generate_random_bytes(length: int, backend: Optional["QuantumBackend"] = None) -> bytes:
    """Generate random bytes using quantum measurement.

    Raises:
        InvalidLengthError: length <= 0
    """
    if length <= 0:
        raise InvalidLengthError()
    if backend is None:
        backend = _default_backend()
    return backend.random_bytes(length)


def generate_random_int(low: int, high: int, backend: Optional["QuantumBackend"] = None) -> int:
    """Generate a random integer in [low, high] using quantum measurement.

    Raises:
        InvalidRangeError: low >= high
    """
    if low >= high:
        raise InvalidRangeError()
    if backend is None:
        backend = _default_backend()

    span = high - low + 1
    n_bits = (span - 1).bit_length()
    n_bytes = (n_bits + 7) // 8
    mask = (1 << n_bits) - 1

    for _ in range(MAX_REJECTION_ROUNDS):
        value = int.from_bytes(backend.random_bytes(n_bytes), "big") & mask
        if value < span:
            return low + value

    raise BackendError(ErrorCode.RUNTIME, f"no value below {span} after {MAX_REJECTION_ROUNDS} draws")
