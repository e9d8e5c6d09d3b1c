"""EasyQ - quantum operations without the quantum mechanics.

This package provides:
- Quantum search over unstructured collections (Grover's algorithm)
- Random numbers from quantum measurement
- Quantum key distribution (E91) with channel security evaluation

Subpackages:
- easyq.search: iteration planning, match-count estimation and search
- easyq.crypto: key distribution and security evaluation
- easyq.backends: simulator and hardware backends
- easyq.grover: amplitude amplification circuits
"""

import logging

__version__ = "0.1.0"

__all__ = [
    # Context
    "QuantumContext",
    "ConnectionConfig",
    "BackendType",
    # Search
    "SearchOptions",
    "IterationStrategy",
    "SamplingStrategy",
    "search",
    "search_one",
    "plan_search",
    # Key distribution
    "KeyDistributionOptions",
    "generate_key",
    "verify_channel_security",
    "security_margin",
    # Randomness
    "generate_random_bytes",
    "generate_random_int",
    # Errors
    "EasyQError",
]

from .config import BackendType, ConnectionConfig
from .context import QuantumContext
from .crypto import KeyDistributionOptions, generate_key, security_margin, verify_channel_security
from .errors import EasyQError
from .rng import generate_random_bytes, generate_random_int
from .search import IterationStrategy, SamplingStrategy, SearchOptions, plan_search, search, search_one

logging.getLogger(__name__).addHandler(logging.NullHandler())
