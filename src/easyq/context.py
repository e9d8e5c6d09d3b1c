"""Caller-owned quantum context.

A QuantumContext bundles one backend with the configuration it was built
from. Every operation goes through an explicit context (or an explicit
backend argument); there is no process-wide state, so several contexts can
target different backends concurrently.

Backends are created from a registry keyed by BackendType.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from .config import BackendType, ConnectionConfig, validate_connection_config
from .core import ChannelReport, KeyDistributionOutcome, SearchResult
from .crypto.keydist import KeyDistributionOptions, generate_key, verify_channel_security
from .errors import UnknownBackendError
from .rng import generate_random_bytes, generate_random_int
from .search import SearchOptions, SearchPlan, plan_search, search, search_one
from .backends.base import QuantumBackend

BackendFactory = Callable[[ConnectionConfig], QuantumBackend]

REGISTRY: dict[BackendType, BackendFactory] = {}


def register_backend(backend_type: BackendType, factory: BackendFactory) -> None:
    """Register a factory building a backend from a ConnectionConfig."""
    REGISTRY[backend_type] = factory


def list_supported() -> list[BackendType]:
    """Backend types that have a registered factory."""
    return sorted(REGISTRY, key=lambda t: t.value)


def simulator_seed(config: ConnectionConfig) -> Optional[int]:
    """Simulator seed from ``provider_settings["seed"]``, if one is given."""
    seed = config.provider_settings.get("seed") if config.provider_settings else None
    return int(seed) if seed is not None else None


def _simulator_factory(config: ConnectionConfig) -> QuantumBackend:
    from .backends.simulator import SimulatorBackend

    return SimulatorBackend(seed=simulator_seed(config))


def _ibm_factory(config: ConnectionConfig) -> QuantumBackend:
    from .backends.ibm_quantum import IBMQuantumBackend

    settings = config.provider_settings or {}
    return IBMQuantumBackend(
        backend_name=settings.get("backend_name"),
        token=config.token or None,
        instance=settings.get("instance"),
    )


register_backend(BackendType.SIMULATOR, _simulator_factory)
register_backend(BackendType.IBM_QUANTUM_EXPERIENCE, _ibm_factory)


def create_backend(config: ConnectionConfig) -> QuantumBackend:
    """Validate config and build the matching backend.

    Raises:
        InvalidConfigurationError: incomplete configuration
        UnknownBackendError: no factory registered for the backend type
    """
    validate_connection_config(config)
    if config.backend_type not in REGISTRY:
        available = [t.value for t in list_supported()]
        raise UnknownBackendError(
            f"no backend registered for {config.backend_type.value}. Available: {available}"
        )
    return REGISTRY[config.backend_type](config)


class QuantumContext:
    """Handle owning a quantum backend.

    Example:
        >>> ctx = QuantumContext()  # local simulator
        >>> ctx.search_one(list(range(8)), lambda x: x == 3).index
        3
    """

    def __init__(
        self,
        backend: Optional[QuantumBackend] = None,
        config: Optional[ConnectionConfig] = None,
    ):
        """Initialize the context.

        Args:
            backend: Ready backend instance; takes precedence over config
            config: Connection configuration used to build a backend
        """
        self.config = config or ConnectionConfig()
        if backend is None:
            backend = create_backend(self.config)
        else:
            validate_connection_config(self.config)
        self.backend = backend

    def plan(self, items: Sequence[Any], predicate: Callable[[Any], bool],
             options: Optional[SearchOptions] = None) -> SearchPlan:
        return plan_search(items, predicate, options, self.backend)

    def search(self, items: Sequence[Any], predicate: Callable[[Any], bool],
               options: Optional[SearchOptions] = None) -> list[SearchResult]:
        return search(items, predicate, options, self.backend)

    def search_one(self, items: Sequence[Any], predicate: Callable[[Any], bool],
                   options: Optional[SearchOptions] = None) -> SearchResult:
        return search_one(items, predicate, options, self.backend)

    def generate_key(self, options: Optional[KeyDistributionOptions] = None) -> KeyDistributionOutcome:
        return generate_key(options, self.backend)

    def verify_channel_security(self, options: Optional[KeyDistributionOptions] = None) -> ChannelReport:
        return verify_channel_security(options, self.backend)

    def random_bytes(self, length: int) -> bytes:
        return generate_random_bytes(length, self.backend)

    def random_int(self, low: int, high: int) -> int:
        return generate_random_int(low, high, self.backend)

    def __repr__(self) -> str:
        return f"QuantumContext(backend={self.backend.name()!r}, config={self.config!r})"
