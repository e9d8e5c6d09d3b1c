"""Backend implementations executing the quantum primitives."""

from .base import QuantumBackend

__all__ = ["QuantumBackend"]

# Circuit backends need qiskit / qiskit-aer
try:
    from .circuit import CircuitBackend
    from .simulator import SimulatorBackend
    __all__ += ["CircuitBackend", "SimulatorBackend"]
except ImportError:
    pass

try:
    from .ibm_quantum import IBMQuantumBackend, IBM_AVAILABLE
    if IBM_AVAILABLE:
        __all__.append("IBMQuantumBackend")
except ImportError:
    pass
