"""Connection configuration for quantum backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from .errors import (
    InvalidAuthError,
    MissingEndpointError,
    MissingProviderInfoError,
    UnknownBackendError,
)


class BackendType(str, Enum):
    """Kind of quantum resource to connect to."""
    SIMULATOR = "simulator"
    MICROSOFT_QUANTUM_CLOUD = "microsoft_quantum_cloud"
    IBM_QUANTUM_EXPERIENCE = "ibm_quantum_experience"
    GOOGLE_QUANTUM_AI = "google_quantum_ai"
    LOCAL_QUANTUM_DEVICE = "local_quantum_device"
    CUSTOM = "custom"


CLOUD_BACKENDS = frozenset({
    BackendType.MICROSOFT_QUANTUM_CLOUD,
    BackendType.IBM_QUANTUM_EXPERIENCE,
    BackendType.GOOGLE_QUANTUM_AI,
})


@dataclass(frozen=True)
class ConnectionConfig:
    """Information needed to connect to a quantum computing resource.

    Credentials are excluded from ``repr``.
    """
    backend_type: BackendType = BackendType.SIMULATOR
    endpoint: str = ""
    port: int = 0
    region: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    token: str = field(default="", repr=False)
    provider_settings: Mapping[str, str] = field(default_factory=dict)


def simulator_config() -> ConnectionConfig:
    """Configuration for the local simulator (the default)."""
    return ConnectionConfig(backend_type=BackendType.SIMULATOR)


def validate_connection_config(config: ConnectionConfig) -> None:
    """Check that a connection configuration is complete.

    Raises:
        InvalidAuthError: cloud backend without a token or username/password
        MissingEndpointError: local device without an endpoint
        MissingProviderInfoError: custom backend without a ProviderName
        UnknownBackendError: unrecognised backend type
    """
    backend_type = config.backend_type
    if backend_type is BackendType.SIMULATOR:
        return
    if backend_type in CLOUD_BACKENDS:
        if not config.token and not (config.username and config.password):
            raise InvalidAuthError()
        return
    if backend_type is BackendType.LOCAL_QUANTUM_DEVICE:
        if not config.endpoint:
            raise MissingEndpointError()
        return
    if backend_type is BackendType.CUSTOM:
        if not config.provider_settings or not config.provider_settings.get("ProviderName"):
            raise MissingProviderInfoError()
        return
    raise UnknownBackendError(f"unknown backend type: {backend_type!r}")
