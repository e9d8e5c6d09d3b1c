"""Shared test fixtures.

FakeBackend は量子回路を実行せず、事前に用意した結果を返すテスト用バックエンドです。
プランナーやリトライ制御などの古典的な判断ロジックを、Qiskit なしで決定的に検証できます。
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

import pytest

from easyq.backends.base import QuantumBackend
from easyq.core import AmplificationResult, KeyDistributionOutcome


class FakeBackend(QuantumBackend):
    """Scripted backend recording every call it receives."""

    def __init__(
        self,
        hits: Optional[Iterable[Optional[int]]] = None,
        key_outcomes: Optional[Iterable[KeyDistributionOutcome]] = None,
        random_stream: bytes = b"",
    ):
        # None in ``hits`` means "no match" for that attempt
        self._hits: List[Optional[int]] = list(hits or [])
        self._key_outcomes: List[KeyDistributionOutcome] = list(key_outcomes or [])
        self._random = bytearray(random_stream)
        self.amplification_calls: List[int] = []
        self.key_exchange_calls: List[Any] = []
        self.count_calls: List[Any] = []

    def count_matches(self, items, predicate, mode, sample_size):
        self.count_calls.append((mode, sample_size))
        return super().count_matches(items, predicate, mode, sample_size)

    def run_amplification(self, items: Sequence[Any], predicate, iterations: int) -> AmplificationResult:
        self.amplification_calls.append(iterations)
        index = self._hits.pop(0) if self._hits else None
        if index is None:
            return AmplificationResult(found=False)
        return AmplificationResult(found=True, item=items[index], index=index)

    def run_key_exchange(self, options) -> KeyDistributionOutcome:
        self.key_exchange_calls.append(options)
        if not self._key_outcomes:
            raise AssertionError("unexpected key exchange")
        return self._key_outcomes.pop(0)

    def random_bytes(self, length: int) -> bytes:
        out = bytes(self._random[:length])
        del self._random[:length]
        return out

    def name(self) -> str:
        return "fake"

    @property
    def is_simulator(self) -> bool:
        return True


@pytest.fixture
def fake_backend():
    return FakeBackend()


def secure_outcome(**overrides) -> KeyDistributionOutcome:
    values = dict(
        success=True,
        key=bytes(range(32)),
        security_parameter=2.79,
        error_rate=0.02,
        entangled_pairs_created=3328,
        failure_reason=None,
        authentication_tag=b"\x01" * 32,
    )
    values.update(overrides)
    return KeyDistributionOutcome(**values)


def failed_outcome(**overrides) -> KeyDistributionOutcome:
    values = dict(
        success=False,
        security_parameter=1.95,
        error_rate=0.31,
        entangled_pairs_created=3328,
        failure_reason=None,
    )
    values.update(overrides)
    return KeyDistributionOutcome(**values)
