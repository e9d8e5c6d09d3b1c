"""Tests for the search runner and its retry policy.

FakeBackend を使って、各試行で増幅が何回呼ばれ、どの反復回数が
渡されたかを記録し、リトライ制御を決定的に検証します。

リトライ方針:
- 各試行でバックエンドを 1 回呼び出す（反復回数はプランの値）
- 「解なし」の結果は次の試行を引き起こす（同じプランを再利用）
- max_attempts を使い切っても解が無ければ NoMatchesError
"""

import pytest

from conftest import FakeBackend
from easyq.core import SearchResult
from easyq.errors import BackendError, ErrorCode, InvalidInputError, NoMatchesError
from easyq.search import (
    IterationStrategy,
    SamplingStrategy,
    SearchOptions,
    execute_plan,
    make_plan,
    search,
    search_one,
)


class FailingBackend(FakeBackend):
    def run_amplification(self, items, predicate, iterations):
        raise BackendError(ErrorCode.TIMEOUT, "device queue timed out")


class ScriptedCountBackend(FakeBackend):
    """FULL_SCAN の数え上げ結果を呼び出しごとに指定できるバックエンド."""

    def __init__(self, counts, **kwargs):
        super().__init__(**kwargs)
        self._counts = list(counts)

    def count_matches(self, items, predicate, mode, sample_size):
        self.count_calls.append((mode, sample_size))
        return self._counts.pop(0)


ASSUME_ONE = SearchOptions(sampling_strategy=SamplingStrategy.ASSUME_ONE)
FULL_SCAN = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN)


class TestRetryPolicy:
    """リトライ制御のテスト."""

    def test_retries_with_same_plan(self):
        """2 回失敗した後 3 回目でヒット.

        N=16, M=1 の最適反復回数は 3。すべての試行で同じ 3 が渡されるべきです。
        """
        backend = FakeBackend(hits=[None, None, 5])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.ASSUME_ONE, max_attempts=4)

        results = search(list(range(16)), lambda x: x == 5, opts, backend)

        assert results == [SearchResult(index=5, item=5)]
        assert backend.amplification_calls == [3, 3, 3]

    def test_exhausted(self):
        """全試行で解が見つからなければ NoMatchesError."""
        backend = FakeBackend(hits=[None] * 10)
        opts = SearchOptions(sampling_strategy=SamplingStrategy.ASSUME_ONE, max_attempts=3)

        with pytest.raises(NoMatchesError):
            search(list(range(16)), lambda x: x == 5, opts, backend)
        assert len(backend.amplification_calls) == 3

    def test_attempts_clamped_to_one(self):
        backend = FakeBackend(hits=[None])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.ASSUME_ONE, max_attempts=0)
        with pytest.raises(NoMatchesError):
            search(list(range(16)), lambda x: x == 5, opts, backend)
        assert len(backend.amplification_calls) == 1

    def test_resample_on_retry(self):
        """resample_on_retry=True では各リトライ前に推定をやり直す."""
        items = list(range(64))
        backend = FakeBackend(hits=[None, None, None])
        opts = SearchOptions(
            sampling_strategy=SamplingStrategy.FULL_SCAN, max_attempts=3, resample_on_retry=True
        )
        with pytest.raises(NoMatchesError):
            search(items, lambda x: x == 7, opts, backend)
        assert len(backend.count_calls) == 3

    def test_default_does_not_resample(self):
        items = list(range(64))
        backend = FakeBackend(hits=[None, None, None])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, max_attempts=3)
        with pytest.raises(NoMatchesError):
            search(items, lambda x: x == 7, opts, backend)
        assert len(backend.count_calls) == 1

    def test_backend_error_propagates(self):
        """バックエンドのエラーは「解なし」に変換されず、そのまま伝播する."""
        with pytest.raises(BackendError) as exc_info:
            search(list(range(16)), lambda x: x == 5, ASSUME_ONE, FailingBackend())
        assert exc_info.value.code == ErrorCode.TIMEOUT


class TestShortCircuits:
    """増幅を行わずに結果が決まるケース."""

    def test_no_matches_skips_backend(self):
        """推定値 0 ではバックエンドを呼ばずに NoMatchesError."""
        backend = FakeBackend(hits=[1])
        with pytest.raises(NoMatchesError):
            search(list(range(32)), lambda x: False, FULL_SCAN, backend)
        assert backend.amplification_calls == []

    def test_saturated_returns_all(self):
        """全要素が解の場合は増幅せずに全要素を返す."""
        backend = FakeBackend()
        items = ["a", "b", "c", "d"]
        results = search(items, lambda s: True, FULL_SCAN, backend)
        assert [r.item for r in results] == items
        assert [r.index for r in results] == [0, 1, 2, 3]
        assert backend.amplification_calls == []

    def test_saturated_respects_max_targets(self):
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, max_targets=2)
        results = search(["a", "b", "c"], lambda s: True, opts, FakeBackend())
        assert len(results) == 2

    def test_empty_collection(self):
        backend = FakeBackend()
        with pytest.raises(NoMatchesError):
            search([], lambda x: True, ASSUME_ONE, backend)
        assert backend.amplification_calls == []

    def test_invalid_input_before_backend(self):
        backend = FakeBackend(hits=[0])
        with pytest.raises(InvalidInputError):
            search([1, 2, 3], lambda a, b: True, ASSUME_ONE, backend)
        assert backend.amplification_calls == []


class TestCollectingResults:
    """複数の解の収集."""

    def test_collects_distinct_hits(self):
        """推定 3 個の解: 重複ヒットと失敗を挟みつつ 3 個集まった時点で終了."""
        targets = {3, 9, 20}
        backend = FakeBackend(hits=[9, 9, None, 3, 20, 3, 3])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, max_attempts=10)

        results = search(list(range(32)), lambda x: x in targets, opts, backend)

        assert [r.index for r in results] == [3, 9, 20]
        assert len(backend.amplification_calls) == 5

    def test_max_targets(self):
        targets = {3, 9, 20}
        backend = FakeBackend(hits=[20, 3, 9])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, max_targets=1)

        results = search(list(range(32)), lambda x: x in targets, opts, backend)

        assert [r.index for r in results] == [20]
        assert len(backend.amplification_calls) == 1

    def test_partial_results_after_exhaustion(self):
        """予算を使い切った時点で得られた解を返す."""
        targets = {3, 9, 20}
        backend = FakeBackend(hits=[9, None, None])
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, max_attempts=3)

        results = search(list(range(32)), lambda x: x in targets, opts, backend)
        assert [r.index for r in results] == [9]


class TestSearchOne:
    """search_one: 解は 1 個と仮定し、試行回数は 3 回."""

    def test_returns_first_hit(self):
        backend = FakeBackend(hits=[None, 11])
        result = search_one(list(range(16)), lambda x: x == 11, backend=backend)
        assert result == SearchResult(index=11, item=11)
        assert backend.count_calls == []

    def test_overrides_options(self):
        """呼び出し側のオプションに関係なく ASSUME_ONE と 3 回の試行が使われる."""
        backend = FakeBackend(hits=[None] * 10)
        opts = SearchOptions(
            sampling_strategy=SamplingStrategy.FULL_SCAN,
            max_attempts=9,
            iteration_strategy=IterationStrategy.CONSERVATIVE,
        )
        with pytest.raises(NoMatchesError):
            search_one(list(range(16)), lambda x: x == 11, opts, backend)
        # N=16, M=1, CONSERVATIVE: round(3.108 - 1) = 2
        assert backend.amplification_calls == [2, 2, 2]
        assert backend.count_calls == []


class TestResampleBranches:
    """resample_on_retry で再推定した結果が「全要素が解」または「解なし」になる場合."""

    RESAMPLE = SearchOptions(
        sampling_strategy=SamplingStrategy.FULL_SCAN, max_attempts=3, resample_on_retry=True
    )

    def test_saturated_replan_returns_all(self):
        """再推定で M=N になったら、0 回の増幅は行わずに全要素を返す."""
        backend = ScriptedCountBackend(counts=[1, 8], hits=[None, 0, 0])
        items = list("abcdefgh")

        results = search(items, lambda s: True, self.RESAMPLE, backend)

        assert [r.item for r in results] == items
        assert backend.amplification_calls == [2]
        assert len(backend.count_calls) == 2

    def test_saturated_replan_respects_max_targets(self):
        backend = ScriptedCountBackend(counts=[1, 8], hits=[None])
        opts = SearchOptions(
            sampling_strategy=SamplingStrategy.FULL_SCAN,
            max_attempts=3,
            resample_on_retry=True,
            max_targets=3,
        )
        results = search(list(range(8)), lambda x: True, opts, backend)
        assert [r.index for r in results] == [0, 1, 2]

    def test_no_match_replan_stops(self):
        """再推定で M=0 になったら、それ以上増幅せずに NoMatchesError."""
        backend = ScriptedCountBackend(counts=[1, 0], hits=[None, 3, 3])

        with pytest.raises(NoMatchesError):
            search(list(range(8)), lambda x: x == 3, self.RESAMPLE, backend)

        assert backend.amplification_calls == [2]
        assert len(backend.count_calls) == 2


class TestExecutePlan:
    """与えられたプランの反復回数がそのままバックエンドに渡る."""

    def test_uses_given_plan(self):
        backend = FakeBackend(hits=[None, 4])
        plan = make_plan(16, 1, SearchOptions(max_attempts=4))

        results = execute_plan(list(range(16)), lambda x: x == 4, plan, SearchOptions(), backend)

        assert results == [SearchResult(index=4, item=4)]
        assert backend.amplification_calls == [plan.iterations, plan.iterations]
        assert backend.count_calls == []

    def test_no_match_plan(self):
        backend = FakeBackend(hits=[0])
        with pytest.raises(NoMatchesError):
            execute_plan(list(range(16)), lambda x: False, make_plan(16, 0), SearchOptions(), backend)
        assert backend.amplification_calls == []
