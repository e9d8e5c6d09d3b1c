"""Base class for quantum backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Sequence

from ..core import AmplificationResult, KeyDistributionOutcome
from ..search.estimation import count_matches
from ..search.options import SamplingStrategy

if TYPE_CHECKING:
    from ..core import Predicate
    from ..crypto.keydist import KeyDistributionOptions


class QuantumBackend(ABC):
    """Abstract base class for quantum backends.

    A backend receives fully resolved parameters (iteration counts, key
    distribution options) and returns raw outcomes. It makes no planning
    decisions of its own.
    """

    def count_matches(
        self,
        items: Sequence[Any],
        predicate: "Predicate",
        mode: SamplingStrategy,
        sample_size: int,
    ) -> int:
        """Count matches classically (full scan or uniform sample).

        Parameters
        ----------
        items : Sequence
            Collection being searched
        predicate : Callable
            Match function
        mode : SamplingStrategy
            FULL_SCAN or SAMPLING
        sample_size : int
            Items to draw for SAMPLING

        Returns
        -------
        int
            Matches in the scanned items (unscaled for SAMPLING)
        """
        return count_matches(items, predicate, mode, sample_size)

    @abstractmethod
    def run_amplification(
        self,
        items: Sequence[Any],
        predicate: "Predicate",
        iterations: int,
    ) -> AmplificationResult:
        """Run amplitude amplification once and report the measured item.

        Parameters
        ----------
        items : Sequence
            Collection being searched
        predicate : Callable
            Match function
        iterations : int
            Number of Grover iterations to apply

        Returns
        -------
        AmplificationResult
            ``found`` is True only if the measured item satisfies predicate
        """
        pass

    @abstractmethod
    def run_key_exchange(self, options: "KeyDistributionOptions") -> KeyDistributionOutcome:
        """Run one E91 key exchange with the given options."""
        pass

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        """Return ``length`` bytes from quantum measurement."""
        pass

    @abstractmethod
    def name(self) -> str:
        """Return the backend name."""
        pass

    @property
    @abstractmethod
    def is_simulator(self) -> bool:
        """Return True if this is a simulator backend."""
        pass

    def get_info(self) -> dict[str, Any]:
        """Return backend information."""
        return {
            "name": self.name(),
            "is_simulator": self.is_simulator,
        }
